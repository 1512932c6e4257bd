"""Protocol for the remote game backend (implemented over HTTP, mocked in tests)"""

from typing import Protocol

from src.api.models import (
    AuthRequest,
    CreateGameRequest,
    GameStateResponse,
    MoveRequest,
    UserResponse,
)
from src.core.models import MatchHistoryEntry


class GameBackend(Protocol):
    """Every call either returns the parsed response or raises NetworkOrServerError."""

    def signup(self, request: AuthRequest) -> UserResponse:
        """Create an account."""
        ...

    def login(self, request: AuthRequest) -> UserResponse:
        """Log in to an existing account."""
        ...

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """Start a new game with the requesting player in it."""
        ...

    def get_game(self, game_id: str) -> GameStateResponse:
        """Current state of a game."""
        ...

    def make_move(self, game_id: str, request: MoveRequest) -> GameStateResponse:
        """Submit a move and return the state after it."""
        ...

    def list_games(self, user_id: str) -> list[MatchHistoryEntry]:
        """Games the user took part in."""
        ...
