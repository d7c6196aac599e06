import numpy as np
import pytest

from blockfall.game import GameGrid, InvalidConfiguration, Piece, TetrominoType


def _fill_row(grid: GameGrid, y: int) -> None:
    for x in range(grid.width):
        grid.set_occupied(x, y)


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5), (5, -3)])
def test_non_positive_dimensions_are_fatal(width, height):
    with pytest.raises(InvalidConfiguration):
        GameGrid(width, height)


def test_above_board_is_never_occupied():
    grid = GameGrid(4, 4)
    grid.grid.fill(True)
    assert not grid.is_occupied(0, -1)
    assert not grid.is_occupied(3, -10)
    assert grid.is_occupied(0, 0)


def test_can_place_checks_walls_and_floor():
    grid = GameGrid(6, 8)
    # O occupies mask columns 1-2 and rows 1-2
    assert grid.can_place(Piece(TetrominoType.O, x=-1, y=0))
    assert not grid.can_place(Piece(TetrominoType.O, x=-2, y=0))
    assert grid.can_place(Piece(TetrominoType.O, x=3, y=0))
    assert not grid.can_place(Piece(TetrominoType.O, x=4, y=0))
    assert grid.can_place(Piece(TetrominoType.O, x=0, y=5))
    assert not grid.can_place(Piece(TetrominoType.O, x=0, y=6))


def test_cells_above_the_top_are_legal():
    grid = GameGrid(6, 8)
    _fill_row(grid, 1)
    assert grid.can_place(Piece(TetrominoType.O, x=0, y=-2))
    assert grid.can_place(Piece(TetrominoType.O, x=0, y=-5))
    assert not grid.can_place(Piece(TetrominoType.O, x=0, y=-1))
    # still blocked by the side walls while above the board
    assert not grid.can_place(Piece(TetrominoType.O, x=-2, y=-5))


def test_can_place_detects_overlap():
    grid = GameGrid(6, 8)
    grid.set_occupied(1, 1)
    piece = Piece(TetrominoType.O, x=0, y=0)
    assert not grid.can_place(piece)
    assert grid.can_place(piece, dx=1, dy=0)
    assert not grid.can_place(piece, dx=-1, dy=-1)


def test_can_place_with_rotation_has_no_side_effects():
    grid = GameGrid(4, 8)
    piece = Piece(TetrominoType.I, rotation=1, x=-2, y=0)
    assert grid.can_place(piece)
    assert not grid.can_place(piece, rotation_delta=1)
    assert not grid.can_place(piece, rotation_delta=-1)
    assert (piece.rotation, piece.x, piece.y) == (1, -2, 0)


def test_merge_marks_piece_cells():
    grid = GameGrid(6, 8)
    grid.merge(Piece(TetrominoType.O, x=0, y=5))
    occupied = {(int(x), int(y)) for y, x in zip(*np.nonzero(grid.grid))}
    assert occupied == {(1, 6), (2, 6), (1, 7), (2, 7)}


def test_merge_refuses_cells_above_the_board():
    grid = GameGrid(6, 8)
    # vertical I: column 2 of its mask, rows -2..1 on the board
    with pytest.raises(ValueError):
        grid.merge(Piece(TetrominoType.I, rotation=1, x=0, y=-2))
    assert not grid.grid.any()


def test_row_is_full_only_when_every_column_is_set():
    grid = GameGrid(4, 3)
    _fill_row(grid, 1)
    grid.set_occupied(0, 2)
    grid.set_occupied(1, 2)
    grid.set_occupied(2, 2)
    assert grid.is_row_full(1)
    assert not grid.is_row_full(0)
    assert not grid.is_row_full(2)
    grid.set_occupied(3, 2)
    assert grid.is_row_full(2)


def test_clear_full_and_empty_pattern():
    grid = GameGrid(4, 3)
    _fill_row(grid, 0)
    _fill_row(grid, 2)
    result = grid.clear_full_lines()
    assert result.count == 2
    assert result.rows == [0, 2]
    assert not grid.grid.any()
    assert grid.grid.shape == (3, 4)


def test_clear_without_full_rows_is_a_no_op():
    grid = GameGrid(4, 3)
    grid.set_occupied(0, 2)
    grid.set_occupied(3, 1)
    before = grid.grid.copy()
    result = grid.clear_full_lines()
    assert (result.count, result.rows) == (0, [])
    assert np.array_equal(grid.grid, before)


def test_clear_shifts_remaining_rows_down_in_order():
    grid = GameGrid(3, 4)
    grid.set_occupied(0, 0)
    _fill_row(grid, 1)
    grid.set_occupied(1, 2)
    _fill_row(grid, 3)
    result = grid.clear_full_lines()
    assert result.rows == [1, 3]
    expected = np.array(
        [
            [0, 0, 0],
            [0, 0, 0],
            [1, 0, 0],
            [0, 1, 0],
        ],
        dtype=bool,
    )
    assert np.array_equal(grid.grid, expected)


def test_drop_distance_on_empty_board():
    grid = GameGrid(12, 24)
    assert grid.drop_distance(Piece(TetrominoType.O, x=4, y=-1)) == 22


def test_drop_distance_stops_on_stack():
    grid = GameGrid(12, 24)
    grid.set_occupied(5, 10)
    assert grid.drop_distance(Piece(TetrominoType.O, x=4, y=-1)) == 8


def test_occupancy_view_is_read_only():
    grid = GameGrid(4, 4)
    grid.set_occupied(2, 3)
    view = grid.occupancy()
    assert view[3, 2]
    with pytest.raises(ValueError):
        view[0, 0] = True


def test_reset_clears_everything():
    grid = GameGrid(4, 4)
    _fill_row(grid, 3)
    grid.set_occupied(1, 0)
    grid.reset()
    assert not grid.grid.any()
    assert grid.get_max_height() == 0
