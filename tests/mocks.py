"""Mock collaborators of the SessionController: an in-memory game backend and session store."""

from typing import Any, Optional

from src.api.models import (
    AuthRequest,
    CreateGameRequest,
    GameStateResponse,
    MoveRequest,
    UserResponse,
)
from src.core.exceptions import NetworkOrServerError
from src.core.models import MatchHistoryEntry, Session
from src.core.shared_types import OutcomeKind
from src.tictactoe.board import Board, derive_outcome


class MockBackend:
    """
    Mock the GameBackend with a dictionary of games.
    ----
    Moves alternate X, O, ... and the winner is computed like a real backend would.
    `fail_with` makes every call raise, `responses` overrides what get_game / make_move return.
    """

    def __init__(self) -> None:
        self.games: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, Any]] = []
        self.auth_supported = True
        self.fail_with: Optional[NetworkOrServerError] = None
        self.responses: dict[str, dict[str, Any]] = {}
        self.history: Any = None
        self._next_id = 1

    # -- GameBackend --
    def signup(self, request: AuthRequest) -> UserResponse:
        return self._auth("signup", request)

    def login(self, request: AuthRequest) -> UserResponse:
        return self._auth("login", request)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        self._record("create_game", request)
        game_id = str(self._next_id)
        self._next_id += 1
        self.games[game_id] = {
            "id": game_id,
            "state": [None] * 9,
            "next": "X",
            "winner": None,
            "players": [request.player],
        }
        return GameStateResponse.model_validate(self.games[game_id])

    def get_game(self, game_id: str) -> GameStateResponse:
        self._record("get_game", game_id)
        return GameStateResponse.model_validate(self._game(game_id))

    def make_move(self, game_id: str, request: MoveRequest) -> GameStateResponse:
        self._record("make_move", (game_id, request))
        if "make_move" in self.responses:
            return GameStateResponse.model_validate(self.responses["make_move"])

        game = self._game(game_id)
        if game["winner"] or game["state"][request.move_index] is not None:
            raise NetworkOrServerError("Illegal move", status_code=400)
        game["state"][request.move_index] = game["next"]
        game["next"] = "O" if game["next"] == "X" else "X"

        outcome = derive_outcome(Board.from_wire(game["state"]))
        if outcome.kind == OutcomeKind.WIN:
            game["winner"] = outcome.mark.value
            game["win_line"] = list(outcome.line)
        elif outcome.kind == OutcomeKind.DRAW:
            game["winner"] = "draw"
        return GameStateResponse.model_validate(game)

    def list_games(self, user_id: str) -> list[MatchHistoryEntry]:
        self._record("list_games", user_id)
        if self.history is not None:
            return self.history
        return [
            MatchHistoryEntry(id=game["id"], winner=game["winner"])
            for game in self.games.values()
            if user_id in game["players"]
        ]

    # -- test helpers --
    def add_game(self, game_id: str, state: list, winner: Optional[str] = None, **extra: Any) -> None:
        self.games[game_id] = {
            "id": game_id,
            "state": state,
            "next": extra.pop("next", "X"),
            "winner": winner,
            "players": extra.pop("players", []),
            **extra,
        }

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def clear(self) -> None:
        """Clear the backend (useful in between tests)"""
        self.games.clear()
        self.calls.clear()
        self.responses.clear()

    def _auth(self, route: str, request: AuthRequest) -> UserResponse:
        self._record(route, request)
        if not self.auth_supported:
            raise NetworkOrServerError("Not Found", status_code=404)
        return UserResponse(id=f"user-{request.username}", username=request.username)

    def _game(self, game_id: str) -> dict[str, Any]:
        if "get_game" in self.responses:
            return self.responses["get_game"]
        if game_id not in self.games:
            raise NetworkOrServerError("Game not found", status_code=404)
        return self.games[game_id]

    def _record(self, name: str, payload: Any) -> None:
        self.calls.append((name, payload))
        if self.fail_with is not None:
            raise self.fail_with


class MockStore:
    """Mock the SessionStore with a single slot."""

    def __init__(self, session: Optional[Session] = None) -> None:
        self.session = session
        self.saves = 0

    def load(self) -> Session | None:
        return self.session

    def save(self, session: Session) -> Session:
        self.session = session
        self.saves += 1
        return session

    def clear(self) -> None:
        self.session = None

