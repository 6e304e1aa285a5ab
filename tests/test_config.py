import pytest

from config import Settings, load_settings


def test_defaults(monkeypatch):
    for name in ("TILES_WIDTH", "TILES_HEIGHT", "TILES_INITIAL", "TILES_SETTLE_DELAY",
                 "TILES_SEED", "TILES_RATE_LIMIT", "TILES_LOG_LEVEL", "TILES_MAX_SESSIONS"):
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == Settings()


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TILES_WIDTH", "5")
    monkeypatch.setenv("TILES_HEIGHT", "3")
    monkeypatch.setenv("TILES_SETTLE_DELAY", "0")
    monkeypatch.setenv("TILES_SEED", "42")
    monkeypatch.setenv("TILES_LOG_LEVEL", "debug")
    monkeypatch.setenv("TILES_MAX_SESSIONS", "25")

    settings = load_settings()

    assert (settings.width, settings.height) == (5, 3)
    assert settings.settle_delay == 0.0
    assert settings.seed == 42
    assert settings.log_level == "DEBUG"
    assert settings.max_sessions == 25


def test_malformed_number_names_variable(monkeypatch):
    monkeypatch.setenv("TILES_WIDTH", "wide")
    with pytest.raises(ValueError, match="TILES_WIDTH"):
        load_settings()
