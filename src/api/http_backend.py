"""Implementation of GameBackend using httpx"""

import logging
from typing import Any, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from src.api.models import (
    AuthRequest,
    CreateGameRequest,
    GameStateResponse,
    MoveRequest,
    UserResponse,
    parse_match_history,
)
from src.core.exceptions import NetworkOrServerError
from src.core.models import MatchHistoryEntry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

FALLBACK_ERROR_MESSAGE = "API Error"


class HTTPGameBackend:
    """JSON over HTTP. Non-2xx responses and transport failures become NetworkOrServerError."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @classmethod
    def connect(cls, api_base: str, timeout: Optional[float] = None) -> "HTTPGameBackend":
        client = httpx.Client(
            base_url=api_base,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        return cls(client)

    def close(self) -> None:
        self.client.close()

    # -- GameBackend --
    def signup(self, request: AuthRequest) -> UserResponse:
        data = self._request("POST", "/users/signup", request)
        return self._parse(UserResponse, data)

    def login(self, request: AuthRequest) -> UserResponse:
        data = self._request("POST", "/users/login", request)
        return self._parse(UserResponse, data)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        data = self._request("POST", "/games", request)
        return self._parse(GameStateResponse, data)

    def get_game(self, game_id: str) -> GameStateResponse:
        data = self._request("GET", f"/games/{quote(game_id, safe='')}")
        return self._parse(GameStateResponse, data)

    def make_move(self, game_id: str, request: MoveRequest) -> GameStateResponse:
        data = self._request("POST", f"/games/{quote(game_id, safe='')}/move", request)
        return self._parse(GameStateResponse, data)

    def list_games(self, user_id: str) -> list[MatchHistoryEntry]:
        data = self._request("GET", f"/users/{quote(user_id, safe='')}/games")
        try:
            return parse_match_history(data)
        except ValidationError as e:
            raise NetworkOrServerError(f"Unexpected match history format: {e.error_count()} error(s)") from e

    # -- Internal helpers --
    def _request(self, method: str, path: str, body: Optional[BaseModel] = None) -> Any:
        logger.debug("%s %s", method, path)
        try:
            response = self.client.request(
                method,
                path,
                json=body.model_dump() if body is not None else None,
            )
        except httpx.TimeoutException as e:
            raise NetworkOrServerError("Request timed out") from e
        except httpx.HTTPError as e:
            raise NetworkOrServerError(str(e) or type(e).__name__) from e

        if not response.is_success:
            message = self._error_message(response)
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise NetworkOrServerError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkOrServerError("Response is not valid JSON", status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Use the "detail" or "message" field of an error body when there is one."""
        try:
            body = response.json()
        except ValueError:
            return FALLBACK_ERROR_MESSAGE
        if not isinstance(body, dict):
            return FALLBACK_ERROR_MESSAGE
        message = body.get("detail") or body.get("message")
        if not message:
            return FALLBACK_ERROR_MESSAGE
        return message if isinstance(message, str) else str(message)

    @staticmethod
    def _parse(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise NetworkOrServerError(
                f"Unexpected response from server: {e.error_count()} invalid field(s)"
            ) from e
