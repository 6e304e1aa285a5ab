import pytest

from grid import Grid
from tile import Tile, TileSlid


def test_spawn_links_cell_both_ways():
    grid = Grid()
    tile = Tile(1)
    tile.spawn(grid.get_cell(2, 3))
    assert tile.cell is grid.get_cell(2, 3)
    assert grid.get_cell(2, 3).tile is tile


def test_respawn_detaches_previous_cell():
    grid = Grid()
    tile = Tile(1)
    tile.spawn(grid.get_cell(0, 0))
    tile.spawn(grid.get_cell(1, 0))
    assert not grid.get_cell(0, 0).occupied
    assert grid.get_cell(1, 0).tile is tile


def test_slide_to_returns_event():
    grid = Grid()
    tile = Tile(7)
    tile.spawn(grid.get_cell(3, 0))
    event = tile.slide_to(grid.get_cell(0, 0))
    assert event == TileSlid(tile_id=7, from_cell=(3, 0), to_cell=(0, 0))
    assert not grid.get_cell(3, 0).occupied
    assert grid.get_cell(0, 0).tile is tile


def test_merge_into_locks_target_and_frees_source():
    grid = Grid()
    source, target = Tile(1), Tile(2)
    source.spawn(grid.get_cell(1, 0))
    target.spawn(grid.get_cell(0, 0))

    source.merge_into(grid.get_cell(0, 0))

    assert source.cell is None
    assert not grid.get_cell(1, 0).occupied
    assert grid.get_cell(0, 0).tile is target
    assert target.locked
    # rank upgrade is left to the engine
    assert target.rank == 0


def test_negative_rank_rejected():
    with pytest.raises(ValueError):
        Tile(1, rank=-1)
    tile = Tile(1, rank=3)
    with pytest.raises(ValueError):
        tile.set_rank(-2)
    assert tile.rank == 3


def test_detach_clears_both_sides_of_the_link():
    grid = Grid()
    tile = Tile(1)
    tile.spawn(grid.get_cell(1, 1))
    tile.detach()
    assert tile.cell is None
    assert not grid.get_cell(1, 1).occupied
    # detaching twice is harmless
    tile.detach()
    assert tile.cell is None
