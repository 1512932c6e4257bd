"""Unit tests for src/tictactoe/board.py"""

from itertools import product

import pytest

from src.core.exceptions import InvalidBoardShape
from src.core.shared_types import Mark, OutcomeKind
from src.tictactoe.board import (
    WIN_LINES,
    Board,
    Outcome,
    derive_outcome,
    find_win_line,
    parse_cell,
    parse_win_line,
)

X = Mark.X
O = Mark.O  # noqa: E741
_ = None


# -- Concrete scenarios --
def test_top_row_win() -> None:
    board = Board.from_cells([X, X, X, _, _, _, _, _, _])
    assert derive_outcome(board) == Outcome.win(X, (0, 1, 2))


def test_full_board_without_line_is_draw() -> None:
    board = Board.from_cells([X, O, X, O, X, O, O, X, O])
    assert derive_outcome(board) == Outcome.draw()


def test_open_board_without_line_is_none() -> None:
    board = Board.from_cells([X, _, _, _, O, _, _, _, _])
    assert derive_outcome(board) == Outcome.none()


def test_empty_board_is_none() -> None:
    assert derive_outcome(Board.empty()).kind == OutcomeKind.NONE


# -- Every single line --
@pytest.mark.parametrize("mark", [X, O])
@pytest.mark.parametrize("line", WIN_LINES)
def test_each_line_is_detected_with_its_mark(line: tuple[int, int, int], mark: Mark) -> None:
    """Only the cells of the line are filled, so exactly one triple matches."""
    cells = [mark if i in line else None for i in range(9)]
    outcome = derive_outcome(cells)
    assert outcome.kind == OutcomeKind.WIN
    assert outcome.mark == mark
    assert outcome.line == line


def test_win_on_full_board_beats_draw() -> None:
    """Last move fills the board and completes a line."""
    board = Board.from_cells([X, O, X, O, X, O, O, X, X])
    assert derive_outcome(board) == Outcome.win(X, (0, 4, 8))


def test_first_line_in_enumeration_order_wins() -> None:
    """Not reachable in a legal game, but the result is still defined: rows come before columns."""
    board = Board.from_cells([X, X, X, X, O, O, X, O, O])
    assert derive_outcome(board).line == (0, 1, 2)


def test_all_boards_without_any_line() -> None:
    """Exhaustive over every board: no matching triple means draw when full, none otherwise."""
    for cells in product([X, O, None], repeat=9):
        if any(cells[a] is not None and cells[a] == cells[b] == cells[c] for a, b, c in WIN_LINES):
            continue
        expected = OutcomeKind.DRAW if None not in cells else OutcomeKind.NONE
        assert derive_outcome(cells).kind == expected


def test_derivation_is_idempotent() -> None:
    board = Board.from_cells([O, X, _, X, O, _, _, X, O])
    first = derive_outcome(board)
    second = derive_outcome(board)
    assert first == second == Outcome.win(O, (0, 4, 8))


def test_raw_wire_values_are_accepted() -> None:
    """Plain strings from JSON work as well as Marks."""
    assert derive_outcome(["O", "", "", "O", "", "", "O", "", ""]) == Outcome.win(O, (0, 3, 6))
    assert derive_outcome([""] * 9) == Outcome.none()


# -- Shape errors --
@pytest.mark.parametrize("length", [0, 1, 8, 10, 81])
def test_wrong_length_raises(length: int) -> None:
    with pytest.raises(InvalidBoardShape):
        derive_outcome([None] * length)


@pytest.mark.parametrize("length", [8, 10])
def test_board_cannot_be_built_with_wrong_length(length: int) -> None:
    with pytest.raises(InvalidBoardShape):
        Board.from_cells([None] * length)


# -- Board helpers --
def test_from_wire_and_back() -> None:
    wire = ["X", None, "O", "", None, None, None, None, "x"]
    board = Board.from_wire(wire)
    assert board.cells == (X, _, O, _, _, _, _, _, X)
    assert board.to_wire() == ["X", None, "O", None, None, None, None, None, "X"]


def test_empty_cells_and_is_full() -> None:
    board = Board.from_cells([X, O, X, O, X, O, O, X, _])
    assert board.empty_cells() == [8]
    assert not board.is_full
    assert board.is_cell_empty(8)
    assert not board.is_cell_empty(0)


@pytest.mark.parametrize("index", [-1, 9, 100])
def test_out_of_range_cell_is_never_empty(index: int) -> None:
    assert not Board.empty().is_cell_empty(index)


def test_board_outcome_property() -> None:
    board = Board.from_cells([_, _, O, _, O, _, O, _, _])
    assert board.outcome == Outcome.win(O, (2, 4, 6))
    assert find_win_line(board) == (2, 4, 6)
    assert find_win_line(Board.empty()) is None


@pytest.mark.parametrize("value", ["Z", "draw", 1, ["X"]])
def test_unknown_cell_values_raise(value: object) -> None:
    with pytest.raises(InvalidBoardShape):
        parse_cell(value)


@pytest.mark.parametrize("value", ["Z", "draw", 1])
def test_unknown_cell_values_in_a_board_raise(value: object) -> None:
    with pytest.raises(InvalidBoardShape):
        Board.from_cells([value] * 9)
    with pytest.raises(InvalidBoardShape):
        derive_outcome([value] * 9)


def test_blank_strings_are_empty_cells_everywhere() -> None:
    board = Board.from_cells(["X", "", "O", "", "", "", "", "", "x"])
    assert board.cells == (X, _, O, _, _, _, _, _, X)
    assert board.is_cell_empty(1)
    assert board.empty_cells() == [1, 3, 4, 5, 6, 7]
    assert not board.is_full
    assert derive_outcome(board) == Outcome.none()


def test_outcome_is_final() -> None:
    assert not Outcome.none().is_final
    assert Outcome.draw().is_final
    assert Outcome.win(X, None).is_final


# -- Win lines sent by a backend --
def test_valid_win_line() -> None:
    assert parse_win_line([6, 7, 8]) == (6, 7, 8)
    assert parse_win_line(None) is None


@pytest.mark.parametrize(
    "line",
    [
        [0, 1],  # too short
        [0, 1, 2, 3],  # too long
        [0, 0, 1],  # repeated cell
        [7, 8, 9],  # outside the board
        5,  # not a list
        True,
        "012",
        [[0], [1], [2]],  # nested lists
        [True, False, 2],
    ],
)
def test_malformed_win_line_raises(line: object) -> None:
    with pytest.raises(InvalidBoardShape):
        parse_win_line(line)
