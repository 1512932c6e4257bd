"""
Local web UI: one HTML page rendered from the AppState, and one POST route per user intent.

Every POST answers with a redirect back to the page, so a reload never repeats an action.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, AsyncIterator, Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from src.api.backend import GameBackend
from src.api.http_backend import HTTPGameBackend
from src.core.config import Settings
from src.core.exceptions import SessionStateError
from src.db.database import create_store_engine, open_store_session
from src.db.repository import SessionStore
from src.db.sql_repository import SQLSessionStore
from src.services.session_controller import SessionController
from src.web.game_view import GameView
from src.web.render import render_page

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def get_controller(request: Request) -> SessionController:
    return request.app.state.controller


Controller = Annotated[SessionController, Depends(get_controller)]


def back_to_page() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[GameBackend] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    """Wire backend, store and controller together. Collaborators not passed in are built from settings."""
    settings = settings or Settings.from_env()

    if backend is None:
        backend = HTTPGameBackend.connect(settings.api_base, settings.request_timeout)
    if store is None:
        store = SQLSessionStore(open_store_session(create_store_engine(settings.store_url)))

    controller = SessionController(backend, store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # The stored session is followed by a blocking history fetch
        await asyncio.to_thread(controller.restore_session)
        yield
        if isinstance(backend, HTTPGameBackend):
            backend.close()

    app = FastAPI(title="Tic Tac Toe Online", lifespan=lifespan)
    app.state.controller = controller
    app.state.settings = settings
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.exception_handler(SessionStateError)
    async def session_state_error(request: Request, exc: SessionStateError) -> RedirectResponse:
        """Intent that does not fit the current phase (e.g. a stale page after logout)."""
        logger.info("Ignored %s %s: %s", request.method, request.url.path, exc)
        request.app.state.controller.state.message = str(exc)
        return back_to_page()

    @app.get("/", response_class=HTMLResponse)
    def page(controller: Controller) -> str:
        view = GameView.from_state(controller.state)
        return render_page(controller.state, view)

    @app.post("/auth")
    def authenticate(
        controller: Controller,
        username: Annotated[str, Form()] = "",
        mode: Annotated[str, Form()] = "login",
    ) -> RedirectResponse:
        controller.authenticate(username, signup=mode == "signup")
        return back_to_page()

    @app.post("/auth/mode")
    def toggle_auth_mode(controller: Controller) -> RedirectResponse:
        controller.toggle_signup_mode()
        return back_to_page()

    @app.post("/logout")
    def logout(controller: Controller) -> RedirectResponse:
        controller.logout()
        return back_to_page()

    @app.post("/theme")
    def toggle_theme(controller: Controller) -> RedirectResponse:
        controller.toggle_theme()
        return back_to_page()

    @app.post("/games")
    def new_game(controller: Controller) -> RedirectResponse:
        controller.start_new_game()
        return back_to_page()

    @app.post("/games/{game_id}/join")
    def join_game(game_id: str, controller: Controller) -> RedirectResponse:
        controller.join_game(game_id)
        return back_to_page()

    @app.post("/games/{game_id}/refresh")
    def reload_game(game_id: str, controller: Controller) -> RedirectResponse:
        controller.load_game(game_id)
        return back_to_page()

    @app.post("/move/{index}")
    def move(index: int, controller: Controller) -> RedirectResponse:
        # Same eligibility rules as the rendered board: a stale or forged click emits nothing
        view = GameView.from_state(controller.state, on_move=controller.play_move)
        if not view.click(index):
            logger.debug("Ignored click on cell %s", index)
        return back_to_page()

    @app.post("/history/refresh")
    def refresh_history(controller: Controller) -> RedirectResponse:
        controller.refresh_history()
        return back_to_page()

    return app
