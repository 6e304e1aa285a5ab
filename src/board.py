# board.py
# The board engine: resolves a turn (slide + merge sweep), spawns tiles and detects game over.

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from core import DEFAULT_RANKS, Direction, EngineState, RankDescriptor, coerce_direction
from grid import Cell, Grid
from tile import Tile, TileSlid

logger = logging.getLogger(__name__)

# --- Events ---

@dataclass(frozen=True)
class TileSpawned:
    tile_id: int
    cell: Tuple[int, int]
    rank: int

@dataclass(frozen=True)
class TileMerged:
    source_tile_id: int
    target_tile_id: int
    target_cell: Tuple[int, int]
    new_rank: int
    number: int

@dataclass(frozen=True)
class ScoreAwarded:
    points: int

@dataclass(frozen=True)
class GameOver:
    pass

@dataclass(frozen=True)
class MoveRejected:
    reason: str

BoardEvent = Union[TileSpawned, TileSlid, TileMerged, ScoreAwarded, GameOver, MoveRejected]

# --- Outcomes and snapshots ---

@dataclass
class MoveOutcome:
    """Result of request_move. `accepted` is False for rejected or no-op moves."""
    accepted: bool
    state: EngineState
    events: List[BoardEvent] = field(default_factory=list)
    points: int = 0

@dataclass
class SettleOutcome:
    """Result of complete_settle: the spawned tile (if any) and whether the game ended."""
    spawned: Optional[TileSpawned]
    game_over: bool
    state: EngineState
    events: List[BoardEvent] = field(default_factory=list)

@dataclass(frozen=True)
class TileSnapshot:
    tile_id: int
    rank: int
    number: int
    locked: bool

class BoardEngine:
    """
    Owns the grid and the live tiles and runs the turn state machine:
    IDLE -> RESOLVING -> SETTLING -> IDLE, or IDLE -> GAME_OVER.

    request_move resolves a sweep synchronously. When it changed the board the engine
    waits in SETTLING until the host calls complete_settle, which spawns a tile and
    checks for game over.
    """

    def __init__(self, width: int = 4, height: int = 4,
                 ranks: Sequence[RankDescriptor] = DEFAULT_RANKS,
                 rng: Optional[random.Random] = None):
        if not ranks:
            raise ValueError("Rank sequence must not be empty.")
        self.grid = Grid(width, height)
        self.ranks = tuple(ranks)
        self.rng = rng if rng is not None else random.Random()
        self.tiles: List[Tile] = []
        self.state = EngineState.IDLE
        self._tile_ids = itertools.count(1)

    # --- Queries ---

    def board_dimensions(self) -> Tuple[int, int]:
        return (self.grid.width, self.grid.height)

    @property
    def max_rank_index(self) -> int:
        return len(self.ranks) - 1

    def tile_at(self, x: int, y: int) -> Optional[TileSnapshot]:
        cell = self.grid.get_cell(x, y)
        if cell is None or not cell.occupied:
            return None
        tile = cell.tile
        return TileSnapshot(tile_id=tile.id, rank=tile.rank,
                            number=self.ranks[tile.rank].number, locked=tile.locked)

    def ranks_grid(self) -> List[List[Optional[int]]]:
        """Row-major ranks, None for empty cells."""
        return [[cell.tile.rank if cell.occupied else None
                 for cell in self.grid.cells[row * self.grid.width:(row + 1) * self.grid.width]]
                for row in range(self.grid.height)]

    def values_grid(self) -> List[List[int]]:
        """Row-major display numbers, 0 for empty cells."""
        return [[0 if rank is None else self.ranks[rank].number for rank in row]
                for row in self.ranks_grid()]

    def max_rank(self) -> Optional[int]:
        if not self.tiles:
            return None
        return max(tile.rank for tile in self.tiles)

    def is_game_over(self) -> bool:
        """
        Checks whether no move is left.
        Returns:
            bool: True if the board is full and no tile has an unlocked, equal-rank orthogonal neighbor.
        """
        if len(self.tiles) != self.grid.size:
            return False

        for tile in self.tiles:
            for direction in Direction:
                adjacent = self.grid.adjacent_cell(tile.cell, direction)
                if adjacent is not None and self._can_merge(tile, adjacent.tile):
                    return False

        return True

    # --- Board setup ---

    def clear(self):
        for tile in self.tiles:
            tile.detach()
        self.tiles = []
        self.state = EngineState.IDLE

    def start(self, initial_tiles: int = 2) -> List[TileSpawned]:
        """
        Clears the board and spawns the opening tiles.
        Args:
            initial_tiles (int): Number of tiles to spawn. Default is 2.
        Returns:
            List[TileSpawned]: One event per spawned tile.
        """
        if initial_tiles < 0:
            raise ValueError("Initial tile count cannot be negative.")
        self.clear()
        spawned = []
        for _ in range(initial_tiles):
            event = self.spawn_tile()
            if event is None:
                break
            spawned.append(event)
        logger.info("Started %dx%d board with %d tiles", self.grid.width, self.grid.height, len(spawned))
        return spawned

    def spawn_tile(self) -> Optional[TileSpawned]:
        cell = self.grid.random_empty_cell(self.rng)
        if cell is None:
            return None
        return self._add_tile(cell, 0)

    def place_tile(self, x: int, y: int, rank: int = 0) -> TileSpawned:
        """
        Puts a tile of the given rank on a specific cell.
        Args:
            x (int): Column index.
            y (int): Row index.
            rank (int): Rank of the new tile. Default is 0.
        Returns:
            TileSpawned: The placement.
        Raises:
            ValueError: If the cell is outside the grid or occupied, or the rank is not in the sequence.
        """
        cell = self.grid.get_cell(x, y)
        if cell is None:
            raise ValueError(f"Cell ({x}, {y}) is outside the {self.grid.width}x{self.grid.height} grid.")
        if cell.occupied:
            raise ValueError(f"Cell ({x}, {y}) is already occupied.")
        if not 0 <= rank <= self.max_rank_index:
            raise ValueError(f"Rank {rank} is outside 0..{self.max_rank_index}.")
        return self._add_tile(cell, rank)

    def _add_tile(self, cell: Cell, rank: int) -> TileSpawned:
        tile = Tile(next(self._tile_ids), rank)
        tile.spawn(cell)
        self.tiles.append(tile)
        return TileSpawned(tile_id=tile.id, cell=cell.coordinates, rank=tile.rank)

    # --- Turn resolution ---

    def request_move(self, direction) -> MoveOutcome:
        """
        Slides every tile towards `direction`, merging equal neighbors once per turn.
        Args:
            direction: A Direction or a direction name.
        Returns:
            MoveOutcome: Accepted with the slide/merge/score events when the board changed,
                         otherwise rejected with a MoveRejected event and no state change.
        """
        chosen = coerce_direction(direction)
        if chosen is None:
            logger.warning("Rejected move with invalid direction %r", direction)
            return self._reject(f"invalid direction: {direction!r}")

        if self.state == EngineState.SETTLING:
            logger.warning("Rejected move %s while the board is settling", chosen.name)
            return self._reject("board is settling")
        if self.state == EngineState.GAME_OVER:
            return self._reject("game is over")

        if self.is_game_over():
            self.state = EngineState.GAME_OVER
            logger.info("Game over detected before move %s", chosen.name)
            outcome = self._reject("game is over")
            outcome.events.append(GameOver())
            return outcome

        self.state = EngineState.RESOLVING
        events: List[BoardEvent] = []
        changed = False

        for x, y in self._scan_order(chosen):
            cell = self.grid.get_cell(x, y)
            if cell.occupied:
                changed |= self._move_tile(cell.tile, chosen, events)

        if not changed:
            self.state = EngineState.IDLE
            logger.debug("Move %s did not change the board", chosen.name)
            return self._reject("move did not change the board")

        self.state = EngineState.SETTLING
        points = sum(event.points for event in events if isinstance(event, ScoreAwarded))
        logger.debug("Move %s produced %d events, %d points", chosen.name, len(events), points)
        return MoveOutcome(accepted=True, state=self.state, events=events, points=points)

    def complete_settle(self) -> SettleOutcome:
        """
        Finishes an accepted move: unlocks all tiles, spawns one tile if there is room
        and evaluates game over.
        Raises:
            RuntimeError: If no move is waiting to settle.
        """
        if self.state != EngineState.SETTLING:
            raise RuntimeError(f"No move to settle; engine is {self.state.name}.")

        for tile in self.tiles:
            tile.locked = False

        events: List[BoardEvent] = []
        spawned = None
        if len(self.tiles) != self.grid.size:
            spawned = self.spawn_tile()
            events.append(spawned)

        game_over = self.is_game_over()
        if game_over:
            self.state = EngineState.GAME_OVER
            events.append(GameOver())
            logger.info("Game over: no moves left")
        else:
            self.state = EngineState.IDLE

        return SettleOutcome(spawned=spawned, game_over=game_over, state=self.state, events=events)

    def _reject(self, reason: str) -> MoveOutcome:
        return MoveOutcome(accepted=False, state=self.state, events=[MoveRejected(reason)])

    def _scan_order(self, direction: Direction) -> Iterator[Tuple[int, int]]:
        # Tiles nearest the destination edge come first in every line.
        xs = range(self.grid.width)
        ys = range(self.grid.height)
        if direction == Direction.RIGHT:
            xs = reversed(xs)
        elif direction == Direction.DOWN:
            ys = reversed(ys)
        ys = list(ys)
        for x in xs:
            for y in ys:
                yield x, y

    def _move_tile(self, tile: Tile, direction: Direction, events: List[BoardEvent]) -> bool:
        new_cell = None # furthest empty cell reached
        adjacent = self.grid.adjacent_cell(tile.cell, direction)

        while adjacent is not None:
            if adjacent.occupied:
                if self._can_merge(tile, adjacent.tile):
                    self._merge_tiles(tile, adjacent.tile, events)
                    return True
                break

            new_cell = adjacent
            adjacent = self.grid.adjacent_cell(adjacent, direction)

        if new_cell is not None:
            events.append(tile.slide_to(new_cell))
            return True

        return False

    def _can_merge(self, a: Tile, b: Optional[Tile]) -> bool:
        return b is not None and a.rank == b.rank and not b.locked

    def _merge_tiles(self, source: Tile, target: Tile, events: List[BoardEvent]):
        self.tiles.remove(source)
        source.merge_into(target.cell)

        new_rank = min(target.rank + 1, self.max_rank_index)
        target.set_rank(new_rank)
        points = self.ranks[new_rank].number

        events.append(TileMerged(source_tile_id=source.id, target_tile_id=target.id,
                                 target_cell=target.cell.coordinates, new_rank=new_rank,
                                 number=points))
        events.append(ScoreAwarded(points))
