"""
Tests for cells and the grid.
"""

import random

import pytest

from core import Direction, coerce_direction
from grid import Grid
from tile import Tile


class TestGrid:

    def test_cells_are_row_major(self):
        grid = Grid(3, 2)
        assert grid.size == 6
        assert [c.coordinates for c in grid.cells] == [
            (0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1),
        ]

    def test_get_cell_out_of_bounds_returns_none(self):
        grid = Grid()
        assert grid.get_cell(-1, 0) is None
        assert grid.get_cell(0, 4) is None
        assert grid.get_cell(4, 0) is None
        assert grid.get_cell(3, 3).coordinates == (3, 3)

    @pytest.mark.parametrize("width,height", [(0, 4), (4, -1), (2.5, 2)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            Grid(width, height)

    def test_adjacent_cell_up_decreases_row(self):
        grid = Grid()
        cell = grid.get_cell(1, 1)
        assert grid.adjacent_cell(cell, Direction.UP).coordinates == (1, 0)
        assert grid.adjacent_cell(cell, Direction.DOWN).coordinates == (1, 2)
        assert grid.adjacent_cell(cell, Direction.LEFT).coordinates == (0, 1)
        assert grid.adjacent_cell(cell, Direction.RIGHT).coordinates == (2, 1)

    def test_adjacent_cell_at_boundary(self):
        grid = Grid()
        assert grid.adjacent_cell(grid.get_cell(0, 0), Direction.UP) is None
        assert grid.adjacent_cell(grid.get_cell(0, 0), Direction.LEFT) is None
        assert grid.adjacent_cell(grid.get_cell(3, 3), Direction.DOWN) is None
        assert grid.adjacent_cell(grid.get_cell(3, 3), Direction.RIGHT) is None


class TestRandomEmptyCell:

    def test_returns_none_when_full(self):
        grid = Grid(2, 2)
        for i, cell in enumerate(grid.cells):
            Tile(i).spawn(cell)
        assert grid.is_full()
        assert grid.random_empty_cell(random.Random(0)) is None

    def test_finds_the_only_empty_cell(self):
        grid = Grid(3, 3)
        for i, cell in enumerate(grid.cells):
            if cell.coordinates != (2, 1):
                Tile(i).spawn(cell)
        for seed in range(20):
            assert grid.random_empty_cell(random.Random(seed)).coordinates == (2, 1)

    def test_scans_forward_with_wrap_around(self):
        grid = Grid(2, 2)
        # occupy the last cell; a scan starting there wraps to index 0
        Tile(1).spawn(grid.cells[3])

        class FixedStart(random.Random):
            def randrange(self, *args, **kwargs):
                return 3

        assert grid.random_empty_cell(FixedStart()).coordinates == (0, 0)

    def test_empty_grid_returns_start_cell(self):
        grid = Grid(4, 4)
        rng = random.Random(7)
        expected = random.Random(7).randrange(16)
        assert grid.random_empty_cell(rng) is grid.cells[expected]


class TestDirection:

    @pytest.mark.parametrize("value,expected", [
        (Direction.LEFT, Direction.LEFT),
        ("up", Direction.UP),
        (" Right ", Direction.RIGHT),
        ("DOWN", Direction.DOWN),
    ])
    def test_coerce_known_values(self, value, expected):
        assert coerce_direction(value) is expected

    @pytest.mark.parametrize("value", ["north", "", None, 3, (0, 1)])
    def test_coerce_unknown_values(self, value):
        assert coerce_direction(value) is None
