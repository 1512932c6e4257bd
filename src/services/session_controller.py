"""Orchestration of user intents: backend calls in one direction, reconciled application state in the other."""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from src.api.backend import GameBackend
from src.api.models import AuthRequest, CreateGameRequest, MoveRequest
from src.core.exceptions import (
    NetworkOrServerError,
    SessionStateError,
    StoreError,
    TicTacToeError,
)
from src.core.models import AppState, GameId, GameSnapshot, Session
from src.core.shared_types import DRAW, Mark, SessionPhase
from src.db.repository import SessionStore
from src.tictactoe.board import Outcome, derive_outcome

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Please wait for the current request to finish."


class SessionController:
    """
    Owns the AppState and is the only thing that changes it.
    ----
    Phases: unauthenticated -> authenticated idle -> game active <-> game concluded.
    Logout goes back to unauthenticated from anywhere.

    At most one backend request is in flight at a time. An action started while another one
    is running is refused (the page shows the board disabled while `fetching` is set).
    """

    def __init__(self, backend: GameBackend, store: SessionStore) -> None:
        self.backend = backend
        self.store = store
        self.state = AppState()
        self._lock = threading.Lock()

    # -- Session lifecycle --
    def restore_session(self) -> Optional[Session]:
        """Called once at startup: pick up the user stored by a previous run."""
        try:
            with self._lock:
                session = self.store.load()
        except StoreError as e:
            logger.warning("Could not restore session: %s", e)
            return None

        if session is None:
            return None

        logger.info("Restored session for %r", session.username)
        self._enter_authenticated(session)
        self.refresh_history()
        return session

    def authenticate(self, username: str, signup: bool = False) -> Optional[Session]:
        """Log in (or sign up). A backend without auth endpoints still gets the user in."""
        username = username.strip()
        if not username:
            return None

        with self._request() as started:
            if not started:
                return None
            self.state.auth_loading = True
            self.state.auth_error = ""
            try:
                session = self._call_auth(username, signup)
                with self._lock:
                    self.store.save(session)
            except TicTacToeError as e:
                logger.warning("Authentication failed: %s", e)
                self.state.auth_error = str(e) or "Auth error"
                return None
            finally:
                self.state.auth_loading = False

        self._enter_authenticated(session)
        self.refresh_history()
        return session

    def logout(self) -> None:
        """Back to unauthenticated, whatever the current phase. Only the theme survives."""
        try:
            with self._lock:
                self.store.clear()
        except StoreError as e:
            # The in-memory session is dropped regardless
            logger.warning("Could not clear stored session: %s", e)

        theme = self.state.theme
        self.state = AppState(theme=theme)
        logger.info("Logged out")

    def toggle_signup_mode(self) -> None:
        self.state.signup_mode = not self.state.signup_mode

    def toggle_theme(self) -> None:
        self.state.theme = self.state.theme.toggled()

    # -- Games --
    def start_new_game(self) -> Optional[GameSnapshot]:
        user = self._require_user()
        with self._request("Creating game...") as started:
            if not started:
                return None
            try:
                response = self.backend.create_game(CreateGameRequest(player=user.player))
                snapshot = response.to_snapshot()
            except TicTacToeError as e:
                self._fail("Failed to create game", e)
                return None

        if self._is_stale(user):
            return None

        # A fresh game starts without a result, even if the server snapshot says otherwise
        self.state.game_id = snapshot.id
        self.state.game = snapshot
        self.state.board = snapshot.board
        self.state.outcome = Outcome.none()
        self.state.phase = SessionPhase.GAME_ACTIVE
        self.state.message = ""
        logger.info("Started game %s", snapshot.id)
        return snapshot

    def join_game(self, game_id: GameId) -> Optional[GameSnapshot]:
        """Join or resume an existing game (e.g. one picked from the match history)."""
        return self._fetch_game(game_id, "Joining game...", "Could not join")

    def load_game(self, game_id: Optional[GameId] = None) -> Optional[GameSnapshot]:
        """Reload a game, by default the current one (to see the opponent's move)."""
        game_id = game_id or self.state.game_id
        if game_id is None:
            raise SessionStateError("There is no game to load.")
        return self._fetch_game(game_id, "Loading game...", "Load failed")

    def play_move(self, index: int) -> Optional[GameSnapshot]:
        """Move intent for one cell. The board only changes once the server has answered."""
        user = self.state.user
        game_id = self.state.game_id
        if user is None or game_id is None or not self.state.playing:
            return None

        with self._request("") as started:
            if not started:
                return None
            try:
                request = MoveRequest(player=user.player, move_index=index)
                snapshot = self.backend.make_move(game_id, request).to_snapshot()
            except TicTacToeError as e:
                self._fail("Move failed", e)
                return None

        if self._is_stale(user, game_id):
            return None
        self._reconcile(snapshot)
        return snapshot

    def refresh_history(self) -> None:
        """Fetch the user's match history. On failure the list is emptied."""
        user = self._require_user()
        with self._request("Loading match history...") as started:
            if not started:
                return
            try:
                history = self.backend.list_games(user.player)
            except TicTacToeError as e:
                self._fail("Failed to load history", e)
                self.state.history = []
                return

        if self._is_stale(user):
            return

        self.state.history = history
        self.state.message = ""

    # -- Internal helpers --
    def _call_auth(self, username: str, signup: bool) -> Session:
        request = AuthRequest(username=username)
        call: Callable = self.backend.signup if signup else self.backend.login
        try:
            return call(request).to_session()
        except NetworkOrServerError as e:
            # Backends without auth endpoints: the username doubles as the user id
            logger.warning(
                "Auth endpoint unavailable (%s), using %r as user id", e, username
            )
            return Session(id=username, username=username)

    def _enter_authenticated(self, session: Session) -> None:
        self.state.user = session
        self.state.phase = SessionPhase.AUTHENTICATED_IDLE
        self.state.auth_error = ""

    def _fetch_game(
        self, game_id: GameId, progress: str, failure: str
    ) -> Optional[GameSnapshot]:
        user = self._require_user()
        with self._request(progress) as started:
            if not started:
                return None
            try:
                snapshot = self.backend.get_game(game_id).to_snapshot()
            except TicTacToeError as e:
                self._fail(failure, e)
                return None

        if self._is_stale(user):
            return None

        self.state.game_id = snapshot.id
        self.state.phase = SessionPhase.GAME_ACTIVE
        self.state.outcome = Outcome.none()
        self._reconcile(snapshot)
        self.state.message = ""
        return snapshot

    def _reconcile(self, snapshot: GameSnapshot) -> None:
        """Replace the local view of the game with the server's snapshot (last response wins)."""
        self.state.game = snapshot
        self.state.board = snapshot.board
        if snapshot.is_finished:
            self.state.outcome = self._resolve_outcome(snapshot)
            self.state.phase = SessionPhase.GAME_CONCLUDED
            logger.info("Game %s finished: %s", snapshot.id, snapshot.winner)

    @staticmethod
    def _resolve_outcome(snapshot: GameSnapshot) -> Outcome:
        """
        The server's winner always counts. The local derivation only supplies a missing win line.
        ----
        Disagreement between the two is logged, and the server's value is kept.
        """
        local = derive_outcome(snapshot.board)
        if snapshot.winner == DRAW:
            server = Outcome.draw()
        else:
            line = snapshot.win_line or local.line
            server = Outcome.win(Mark(snapshot.winner), line)

        if local.kind != server.kind or local.mark != server.mark:
            logger.warning(
                "Server reports %s for game %s but the board reads as %s; keeping the server's result",
                snapshot.winner,
                snapshot.id,
                local.kind if local.mark is None else f"{local.kind} {local.mark}",
            )
        return server

    def _is_stale(self, user: Session, game_id: Optional[GameId] = None) -> bool:
        """True when the user logged out or switched games while the response was on its way."""
        if self.state.user is not user:
            return True
        return game_id is not None and self.state.game_id != game_id

    def _require_user(self) -> Session:
        if self.state.user is None:
            raise SessionStateError("Log in first.")
        return self.state.user

    def _fail(self, what: str, error: TicTacToeError) -> None:
        logger.warning("%s: %s", what, error)
        self.state.message = f"{what}: {error}"

    @contextmanager
    def _request(self, progress: str = "") -> Iterator[bool]:
        """
        Mark a backend request as in flight for the duration of the block.
        Yields False when another request is already running. Only an empty message is
        replaced by BUSY_MESSAGE then.
        """
        with self._lock:
            if self.state.fetching:
                busy = True
            else:
                busy = False
                self.state.fetching = True
                self.state.message = progress

        if busy:
            # The running request's progress text stays on screen
            if not self.state.message:
                self.state.message = BUSY_MESSAGE
            yield False
            return

        try:
            yield True
        finally:
            self.state.fetching = False
