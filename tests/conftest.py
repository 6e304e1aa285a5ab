"""
Pytest fixtures for the tile board tests.
"""

import random

import pytest

from board import BoardEngine


def load_ranks(engine, rows):
    """Fill an engine from row-major ranks, None meaning empty."""
    for y, row in enumerate(rows):
        for x, rank in enumerate(row):
            if rank is not None:
                engine.place_tile(x, y, rank)
    return engine


@pytest.fixture
def engine() -> BoardEngine:
    """An empty, seeded 4x4 engine."""
    return BoardEngine(4, 4, rng=random.Random(1234))


@pytest.fixture
def board_from(engine):
    """Load ranks into the seeded engine fixture."""
    return lambda rows: load_ranks(engine, rows)


@pytest.fixture
def full_locked_out_ranks():
    """A full 4x4 board with no equal orthogonal neighbors."""
    return [
        [0, 1, 0, 1],
        [1, 0, 1, 0],
        [0, 1, 0, 1],
        [1, 0, 1, 0],
    ]
