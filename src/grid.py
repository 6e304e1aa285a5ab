# grid.py
# Cells and the fixed grid that owns them.

import random
from typing import List, Optional, Tuple

from core import Direction

class Cell:
    """A single grid position. `tile` is a back-reference written only by Tile."""

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y
        self.tile = None

    @property
    def coordinates(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def occupied(self) -> bool:
        return self.tile is not None

    def __repr__(self):
        return f"Cell({self.x}, {self.y})"

class Grid:
    """Row-major, fixed-size collection of cells."""

    def __init__(self, width: int = 4, height: int = 4):
        if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
            raise ValueError("Grid width and height must be positive integers.")
        self._width = width
        self._height = height
        self._cells = tuple(Cell(i % width, i // width) for i in range(width * height))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self._cells

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """
        Looks up the cell at (x, y).
        Args:
            x (int): Column index.
            y (int): Row index.
        Returns:
            Optional[Cell]: The cell, or None if the coordinates are outside the grid.
        """
        if 0 <= x < self._width and 0 <= y < self._height:
            return self._cells[y * self._width + x]
        return None

    def adjacent_cell(self, cell: Cell, direction: Direction) -> Optional[Cell]:
        dx, dy = direction.vector
        return self.get_cell(cell.x + dx, cell.y + dy)

    def empty_cells(self) -> List[Cell]:
        return [cell for cell in self._cells if not cell.occupied]

    def is_full(self) -> bool:
        return all(cell.occupied for cell in self._cells)

    def random_empty_cell(self, rng: random.Random) -> Optional[Cell]:
        """
        Picks an empty cell by scanning forward (with wrap-around) from a random start index.
        Args:
            rng (random.Random): Source of randomness for the start index.
        Returns:
            Optional[Cell]: The first empty cell found, or None if every cell is occupied.
        """
        index = rng.randrange(len(self._cells))
        starting_index = index

        while self._cells[index].occupied:
            index += 1
            if index >= len(self._cells):
                index = 0 # wrap around
            if index == starting_index:
                return None

        return self._cells[index]
