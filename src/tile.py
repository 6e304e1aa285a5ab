# tile.py
# A movable value holder bound to at most one cell.

from dataclasses import dataclass
from typing import Optional, Tuple

from grid import Cell

@dataclass(frozen=True)
class TileSlid:
    """A tile moved from one cell to another without merging."""
    tile_id: int
    from_cell: Tuple[int, int]
    to_cell: Tuple[int, int]

class Tile:
    """A numbered tile. The tile's `cell` is the authoritative link; the cell only mirrors it."""

    def __init__(self, tile_id: int, rank: int = 0):
        self.id = tile_id
        self.rank = 0
        self.locked = False
        self.cell: Optional[Cell] = None
        self.set_rank(rank)

    def __repr__(self):
        return f"Tile[{self.id}]@{self.cell.coordinates if self.cell else None}:r{self.rank}"

    def set_rank(self, rank: int):
        if rank < 0:
            raise ValueError("Tile rank cannot be negative.")
        self.rank = rank

    def detach(self):
        """Leaves the current cell, if any."""
        if self.cell is not None:
            self.cell.tile = None
        self.cell = None

    def _attach(self, cell: Cell):
        self.cell = cell
        cell.tile = self

    def spawn(self, cell: Cell):
        """Places the tile on `cell` immediately, leaving any previous cell."""
        self.detach()
        self._attach(cell)

    def slide_to(self, cell: Cell) -> TileSlid:
        """
        Moves the tile to `cell`.
        Args:
            cell (Cell): Destination cell, expected to be empty.
        Returns:
            TileSlid: The move, for the presentation layer.
        """
        origin = self.cell.coordinates
        self.detach()
        self._attach(cell)
        return TileSlid(tile_id=self.id, from_cell=origin, to_cell=cell.coordinates)

    def merge_into(self, target_cell: Cell):
        """
        Leaves the current cell for good and locks the tile on `target_cell`.
        The caller upgrades the target and drops this tile from the board.
        """
        self.detach()
        target_cell.tile.locked = True
