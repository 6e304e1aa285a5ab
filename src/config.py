# config.py
# Environment-driven settings shared by the CLI driver and the API.

import os
from dataclasses import dataclass
from typing import Optional

def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.")

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}.")

@dataclass(frozen=True)
class Settings:
    width: int = 4
    height: int = 4
    initial_tiles: int = 2
    settle_delay: float = 0.1  # seconds the host waits before complete_settle
    seed: Optional[int] = None
    rate_limit: str = "100/minute"
    log_level: str = "INFO"
    max_sessions: int = 1000  # live API games kept in memory

def load_settings() -> Settings:
    """
    Reads settings from TILES_* environment variables, falling back to defaults.
    Returns:
        Settings: The resolved settings.
    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    return Settings(
        width=_env_int("TILES_WIDTH", 4),
        height=_env_int("TILES_HEIGHT", 4),
        initial_tiles=_env_int("TILES_INITIAL", 2),
        settle_delay=_env_float("TILES_SETTLE_DELAY", 0.1),
        seed=_env_int("TILES_SEED", None),
        rate_limit=os.getenv("TILES_RATE_LIMIT", "100/minute"),
        log_level=os.getenv("TILES_LOG_LEVEL", "INFO").upper(),
        max_sessions=_env_int("TILES_MAX_SESSIONS", 1000),
    )
