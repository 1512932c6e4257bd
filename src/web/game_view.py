"""
Render model of the board.

GameView decides which cells can be clicked and which are highlighted, and turns a click into a
move intent. It never changes the board: the next board arrives from the server.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.core.models import AppState
from src.core.shared_types import Mark
from src.tictactoe.board import BOARD_SIZE, MARK_SYMBOLS, Board, Outcome

MoveIntent = Callable[[int], object]


@dataclass(frozen=True)
class CellView:
    index: int
    mark: Optional[Mark]
    clickable: bool
    highlighted: bool

    @property
    def symbol(self) -> str:
        return MARK_SYMBOLS[self.mark] if self.mark is not None else ""

    @property
    def aria_label(self) -> str:
        content = self.mark.value if self.mark is not None else "empty"
        return f"Play at position {self.index + 1} ({content})"


class GameView:
    def __init__(
        self,
        board: Board,
        playing: bool,
        fetching: bool,
        outcome: Outcome,
        on_move: Optional[MoveIntent] = None,
    ) -> None:
        self.board = board
        self.playing = playing
        self.fetching = fetching
        self.outcome = outcome
        self.on_move = on_move

    @classmethod
    def from_state(cls, state: AppState, on_move: Optional[MoveIntent] = None) -> "GameView":
        return cls(
            board=state.board,
            playing=state.playing,
            fetching=state.fetching,
            outcome=state.outcome,
            on_move=on_move,
        )

    @property
    def disabled(self) -> bool:
        """The whole board is locked: not playing, waiting for the server, or the game is over."""
        return not self.playing or self.fetching or self.outcome.is_final

    @property
    def highlight(self) -> tuple[int, ...]:
        return self.outcome.line or ()

    def is_clickable(self, index: int) -> bool:
        return not self.disabled and self.board.is_cell_empty(index)

    def click(self, index: int) -> bool:
        """Emit a move intent for the cell if it can be played. Returns whether one was emitted."""
        if self.on_move is None or not self.is_clickable(index):
            return False
        self.on_move(index)
        return True

    def cells(self) -> list[CellView]:
        highlight = self.highlight
        return [
            CellView(
                index=index,
                mark=self.board[index],
                clickable=self.is_clickable(index),
                highlighted=index in highlight,
            )
            for index in range(BOARD_SIZE)
        ]
