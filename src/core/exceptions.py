"""Custom exceptions shared by all layers."""

from typing import Optional


class TicTacToeError(Exception):
    """Top-level exception of the client. Everything raised on purpose inherits from this."""


class InvalidBoardShape(TicTacToeError):
    """Malformed board data: wrong number of cells, unknown cell value or a broken win line."""


class InvalidRequestError(TicTacToeError):
    """A request to the backend could not be built from the given values."""


class NetworkOrServerError(TicTacToeError):
    """Non-success HTTP response, transport failure or an unreadable response body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionStateError(TicTacToeError):
    """Action is not allowed in the current session phase."""


class StoreError(TicTacToeError):
    """The local session store could not be read or written."""
