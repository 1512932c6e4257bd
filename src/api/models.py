"""Requests to and responses from the game backend"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import GameSnapshot, MatchHistoryEntry, Session
from src.core.shared_types import DRAW, Mark
from src.tictactoe.board import BOARD_SIZE, Board, parse_cell, parse_win_line


def _as_str_id(value: Any) -> Any:
    """Backends hand out integer or string ids. The client only ever treats them as opaque strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# --- REQUEST MODELS ---
class AuthRequest(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Username cannot be empty.")
        return value


class CreateGameRequest(BaseModel):
    player: str


class MoveRequest(BaseModel):
    player: str
    move_index: int

    @field_validator("move_index")
    @classmethod
    def validate_move_index(cls, value: int) -> int:
        if not 0 <= value < BOARD_SIZE:
            raise InvalidRequestError(
                f"Cannot play at cell {value}. Pick a cell between 0 and {BOARD_SIZE - 1}."
            )
        return value


# --- RESPONSE MODELS ---
class UserResponse(BaseModel):
    id: str
    username: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str_id(value)

    def to_session(self) -> Session:
        return Session(id=self.id, username=self.username)


class GameStateResponse(BaseModel):
    id: str
    state: Optional[list[Optional[str]]] = None
    next: Optional[Mark] = None
    winner: Optional[str] = None
    win_line: Optional[list[int]] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str_id(value)

    @field_validator("state", mode="before")
    @classmethod
    def validate_state(cls, value: Any) -> Any:
        """A missing (or non-array) state means an empty board. A wrong length is an error."""
        if not isinstance(value, list):
            return None
        return Board.from_wire(value).to_wire()

    @field_validator("next", mode="before")
    @classmethod
    def validate_next(cls, value: Any) -> Any:
        return parse_cell(value)

    @field_validator("winner", mode="before")
    @classmethod
    def validate_winner(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, str) and value.lower() == DRAW:
            return DRAW
        mark = parse_cell(value)
        return mark.value if mark is not None else None

    @field_validator("win_line", mode="before")
    @classmethod
    def validate_win_line(cls, value: Any) -> Any:
        line = parse_win_line(value)
        return list(line) if line is not None else None

    def to_snapshot(self) -> GameSnapshot:
        board = Board.from_wire(self.state) if self.state is not None else Board.empty()
        return GameSnapshot(
            id=self.id,
            board=board,
            next=self.next,
            winner=self.winner,
            win_line=parse_win_line(self.win_line),
        )


class HistoryEntryResponse(BaseModel):
    id: str
    winner: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str_id(value)

    def to_entry(self) -> MatchHistoryEntry:
        return MatchHistoryEntry(id=self.id, winner=self.winner or None)


def parse_match_history(payload: Any) -> list[MatchHistoryEntry]:
    """History comes either wrapped as {"games": [...]} or as a bare list."""
    if isinstance(payload, dict):
        payload = payload.get("games") or []
    if not isinstance(payload, list):
        return []
    return [HistoryEntryResponse.model_validate(game).to_entry() for game in payload]
