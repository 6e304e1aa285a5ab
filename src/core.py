# core.py
# Shared value types for the tile board engine: directions, engine states and rank descriptors.

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

class EngineState(Enum):
    """Represents where the board engine is within a turn."""
    IDLE = "IDLE"
    RESOLVING = "RESOLVING"
    SETTLING = "SETTLING"
    GAME_OVER = "GAME_OVER"

class Direction(Enum):
    """Represents the possible move directions as (dx, dy) grid steps.

    Rows grow downwards, so UP walks towards row 0.
    """
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

def coerce_direction(value) -> Optional[Direction]:
    """
    Maps an externally delivered direction onto a Direction member.
    Args:
        value: A Direction, or its name in any case (e.g. "up", "LEFT").
    Returns:
        Optional[Direction]: The direction, or None if the value is not one.
    """
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        return Direction.__members__.get(value.strip().upper())
    return None

# --- Rank Descriptors ---

@dataclass(frozen=True)
class RankDescriptor:
    """Display value and colors for one tile rank."""
    number: int
    background_color: str
    text_color: str

_BACKGROUNDS = (
    "#eee4da", "#ede0c8", "#f2b179", "#f59563", "#f67c5f", "#f65e3b",
    "#edcf72", "#edcc61", "#edc850", "#edc53f", "#edc22e",
)
_DARK_TEXT = "#776e65"
_LIGHT_TEXT = "#f9f6f2"
_FALLBACK_BACKGROUND = "#3c3a32"

DEFAULT_RANK_COUNT = 17  # 2 .. 131072, the largest tile a 4x4 board can hold

def build_rank_sequence(count: int = DEFAULT_RANK_COUNT) -> Tuple[RankDescriptor, ...]:
    """
    Builds the ordered rank descriptor sequence, rank r showing 2^(r+1).
    Args:
        count (int): Number of ranks. Default is 17.
    Returns:
        Tuple[RankDescriptor, ...]: Immutable sequence indexed by rank.
    Raises:
        ValueError: If count is not a positive integer.
    """
    if not isinstance(count, int) or count <= 0:
        raise ValueError("Rank count must be a positive integer.")

    ranks = []
    for rank in range(count):
        if rank < len(_BACKGROUNDS):
            background = _BACKGROUNDS[rank]
        else:
            background = _FALLBACK_BACKGROUND
        text = _DARK_TEXT if rank < 2 else _LIGHT_TEXT
        ranks.append(RankDescriptor(number=2 ** (rank + 1), background_color=background, text_color=text))
    return tuple(ranks)

DEFAULT_RANKS = build_rank_sequence()
