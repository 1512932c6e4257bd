"""
The 3x3 board and the derivation of a game's outcome from its cells.

The backend is the authority on whether a game is finished. The derivation below is only
used to fill in a win line when the backend did not send one, so it must agree with the
backend for every reachable position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from src.core.exceptions import InvalidBoardShape
from src.core.shared_types import Mark, OutcomeKind

BOARD_SIZE = 9

Cell = Optional[Mark]
WinLine = tuple[int, int, int]

# Enumeration order matters: the first matching line wins.
WIN_LINES: tuple[WinLine, ...] = (
    # rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # diagonals
    (0, 4, 8),
    (2, 4, 6),
)

MARK_SYMBOLS = {Mark.X: "❌", Mark.O: "⭕"}


def parse_cell(value: Any) -> Cell:
    """Wire value of a single cell to a Mark. null and "" are empty cells."""
    if value is None or value == "":
        return None
    if isinstance(value, Mark):
        return value
    if isinstance(value, str) and value.upper() in Mark.__members__:
        return Mark[value.upper()]
    raise InvalidBoardShape(f"Cannot interpret cell value {value!r} as a mark.")


def parse_win_line(value: Any) -> Optional[WinLine]:
    """Validate a win line sent by the backend: three distinct cell indexes."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in value
    ):
        raise InvalidBoardShape(f"A win line is a list of cell indexes, got {value!r}.")
    line = tuple(value)
    if len(line) != 3 or len(set(line)) != 3:
        raise InvalidBoardShape(f"A win line needs 3 distinct cells, got {list(line)}.")
    if not all(isinstance(i, int) and 0 <= i < BOARD_SIZE for i in line):
        raise InvalidBoardShape(f"Win line {list(line)} points outside the board.")
    return line  # type: ignore[return-value]


@dataclass(frozen=True)
class Board:
    cells: tuple[Cell, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE:
            raise InvalidBoardShape(
                f"A board has exactly {BOARD_SIZE} cells, got {len(self.cells)}."
            )
        # Every cell ends up a Mark or None, whatever it was built from
        object.__setattr__(self, "cells", tuple(parse_cell(cell) for cell in self.cells))

    @classmethod
    def empty(cls) -> Board:
        return cls((None,) * BOARD_SIZE)

    @classmethod
    def from_cells(cls, cells: Iterable[Any]) -> Board:
        return cls(tuple(cells))

    @classmethod
    def from_wire(cls, values: Sequence[Any]) -> Board:
        """Board as sent by the backend: a JSON array of "X", "O" and null."""
        return cls(tuple(values))

    def to_wire(self) -> list[Optional[str]]:
        return [cell.value if cell is not None else None for cell in self.cells]

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def is_cell_empty(self, index: int) -> bool:
        return 0 <= index < BOARD_SIZE and self.cells[index] is None

    def empty_cells(self) -> list[int]:
        return [i for i, cell in enumerate(self.cells) if cell is None]

    @property
    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    @property
    def outcome(self) -> Outcome:
        return derive_outcome(self)


@dataclass(frozen=True)
class Outcome:
    """
    Tagged result of a game: none, win(mark, line) or draw.
    ----
    A win normally carries its line. Only a win reported by the backend without any line
    (and none derivable locally) has line=None.
    """

    kind: OutcomeKind
    mark: Optional[Mark] = None
    line: Optional[WinLine] = None

    @classmethod
    def none(cls) -> Outcome:
        return cls(OutcomeKind.NONE)

    @classmethod
    def win(cls, mark: Mark, line: Optional[WinLine]) -> Outcome:
        return cls(OutcomeKind.WIN, mark, line)

    @classmethod
    def draw(cls) -> Outcome:
        return cls(OutcomeKind.DRAW)

    @property
    def is_final(self) -> bool:
        return self.kind != OutcomeKind.NONE


def derive_outcome(cells: Board | Sequence[Any]) -> Outcome:
    """Scan the eight win lines in order, then check for a full board."""
    board = cells if isinstance(cells, Board) else Board.from_cells(cells)

    for line in WIN_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Outcome.win(board[a], line)

    if board.is_full:
        return Outcome.draw()
    return Outcome.none()


def find_win_line(cells: Board | Sequence[Any]) -> Optional[WinLine]:
    """Only the line of a local win, or None."""
    return derive_outcome(cells).line
