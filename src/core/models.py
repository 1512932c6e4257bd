"""
Boundary layer data model(s).

The API layer converts backend JSON into these objects, the db layer persists the Session, and
the service layer reconciles them into the application state.
(Decouples the wire format and the storage format from the information the controller needs)
"""

from dataclasses import dataclass, field
from typing import Optional

from src.core.shared_types import DRAW, Mark, SessionPhase, Theme
from src.tictactoe.board import Board, Outcome, WinLine

# Type aliases to make the models easier to read
GameId = str
UserId = str
Winner = str  # a Mark value or "draw"


@dataclass(frozen=True)
class Session:
    """The authenticated user. This is what gets persisted between runs."""

    id: UserId
    username: str
    mark: Optional[Mark] = None

    @property
    def player(self) -> str:
        """Identity sent to the backend: the id, or the username when the id is empty."""
        return self.id or self.username

    @property
    def own_mark(self) -> Mark:
        return self.mark or Mark.X


@dataclass(frozen=True)
class GameSnapshot:
    """Authoritative game state as reported by the backend."""

    id: GameId
    board: Board
    next: Optional[Mark] = None
    winner: Optional[Winner] = None
    win_line: Optional[WinLine] = None

    @property
    def is_finished(self) -> bool:
        return bool(self.winner)


@dataclass(frozen=True)
class MatchHistoryEntry:
    id: GameId
    winner: Optional[Winner] = None

    @property
    def label(self) -> str:
        if not self.winner:
            return "In progress"
        if self.winner == DRAW:
            return "Draw"
        return f"Winner: {self.winner}"


@dataclass
class AppState:
    """Everything the page shows. Owned by the SessionController and only changed through it."""

    phase: SessionPhase = SessionPhase.UNAUTHENTICATED
    user: Optional[Session] = None
    game_id: Optional[GameId] = None
    game: Optional[GameSnapshot] = None
    board: Board = field(default_factory=Board.empty)
    outcome: Outcome = field(default_factory=Outcome.none)
    fetching: bool = False
    message: str = ""
    auth_error: str = ""
    auth_loading: bool = False
    signup_mode: bool = False
    history: list[MatchHistoryEntry] = field(default_factory=list)
    theme: Theme = Theme.LIGHT

    @property
    def playing(self) -> bool:
        return self.phase == SessionPhase.GAME_ACTIVE
