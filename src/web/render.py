"""HTML of the single page: auth form when logged out, board + history when logged in."""

from datetime import date
from html import escape
from urllib.parse import quote

from src.core.models import AppState, MatchHistoryEntry
from src.core.shared_types import Mark, OutcomeKind, Theme
from src.tictactoe.board import MARK_SYMBOLS, Outcome
from src.web.game_view import CellView, GameView

TITLE = "Tic Tac Toe Online"


def _mark_label(mark: Mark | None) -> str:
    if mark is None:
        return ""
    return f"{MARK_SYMBOLS[mark]} ({mark.value})"


def _post_button(action: str, label: str, css: str = "btn", disabled: bool = False) -> str:
    """A button that POSTs to `action`. Every state change in the page goes through one of these."""
    return (
        f'<form method="post" action="{escape(action)}" class="inline-form">'
        f'<button class="{css}" type="submit"{" disabled" if disabled else ""}>{label}</button></form>'
    )


def render_theme_toggle(theme: Theme) -> str:
    label = "🌙 Dark" if theme == Theme.LIGHT else "☀️ Light"
    return (
        '<form method="post" action="/theme" class="inline-form">'
        f'<button class="theme-toggle" type="submit" aria-label="Switch to {theme.toggled()} mode">'
        f"{label}</button></form>"
    )


def render_auth_form(state: AppState) -> str:
    signup = state.signup_mode
    heading = "Sign Up" if signup else "Login"
    submit = "Create Account" if signup else "Login"
    switch = "Already have an account? Login" if signup else "Need an account? Sign Up"
    mode = "signup" if signup else "login"
    loading = " disabled" if state.auth_loading else ""
    error = f'<div class="auth-error">{escape(state.auth_error)}</div>' if state.auth_error else ""
    return f"""
<div class="auth-form">
  <h2>{heading}</h2>
  <form method="post" action="/auth">
    <input type="hidden" name="mode" value="{mode}">
    <input class="auth-input" name="username" placeholder="Username" autofocus required{loading}>
    <button class="btn btn-large" type="submit"{loading}>{submit}</button>
  </form>
  {_post_button("/auth/mode", switch, css="btn-link", disabled=state.auth_loading)}
  {error}
</div>"""


def render_cell(cell: CellView) -> str:
    css = "ttt-cell ttt-highlight" if cell.highlighted else "ttt-cell"
    label = escape(cell.aria_label)
    if cell.clickable:
        return (
            f'<form method="post" action="/move/{cell.index}" class="cell-form">'
            f'<button class="{css}" type="submit" aria-label="{label}">{cell.symbol}</button></form>'
        )
    return f'<button class="{css}" type="button" disabled aria-label="{label}">{cell.symbol}</button>'


def render_board(view: GameView) -> str:
    cells = "\n".join(render_cell(cell) for cell in view.cells())
    return f'<div class="ttt-board">\n{cells}\n</div>'


def render_history(history: list[MatchHistoryEntry], current_game_id: str | None) -> str:
    if not history:
        items = "<div>No history yet</div>"
    else:
        rows = []
        for game in history:
            css = "history-item selected" if game.id == current_game_id else "history-item"
            rows.append(
                "<li>"
                + _post_button(
                    f"/games/{quote(game.id, safe='')}/join",
                    f"Game #{escape(game.id)} &mdash; {escape(game.label)}",
                    css=css,
                )
                + "</li>"
            )
        items = '<ul class="history-list">' + "".join(rows) + "</ul>"
    return (
        '<aside class="history-sidebar"><h3>Match History</h3>'
        f"{items}{_post_button('/history/refresh', 'Refresh', css='btn-link')}</aside>"
    )


def render_result(outcome: Outcome) -> str:
    """Overlay shown once the game has a result."""
    if not outcome.is_final:
        return ""
    if outcome.kind == OutcomeKind.DRAW:
        text = '<span class="result-text">🤝 Draw!</span>'
    else:
        text = f'<span class="result-text animate-pop">{MARK_SYMBOLS[outcome.mark]} Wins!</span>'
        if outcome.line:
            positions = ", ".join(str(i + 1) for i in outcome.line)
            text += f'<div class="winline-announce">Winning line: {positions}</div>'
    return (
        '<div class="result-overlay"><div class="result-card">'
        f"{text}{_post_button('/games', 'New Game', css='btn btn-large')}</div></div>"
    )


def render_status(state: AppState) -> str:
    parts = []
    if state.message:
        parts.append(f'<div class="game-message">{escape(state.message)}</div>')

    outcome = state.outcome
    game = state.game
    if outcome.is_final:
        icon = "🤝" if outcome.kind == OutcomeKind.DRAW else MARK_SYMBOLS[outcome.mark]
        parts.append(f'<div><span class="status-icon">{icon}</span></div>')
    elif game is not None and state.playing and game.next is not None:
        parts.append(f"<div><span>Next: {_mark_label(game.next)}</span></div>")

    if game is not None and state.user is not None:
        if outcome.is_final:
            result = "Result: 🤝 Draw" if outcome.kind == OutcomeKind.DRAW else f"Winner: {_mark_label(outcome.mark)}"
            parts.append(f"<div><span>{result}</span></div>")
        elif state.playing:
            turn = "Your turn!" if game.next == state.user.own_mark else "Waiting..."
            parts.append(f"<div><span>{turn}</span></div>")
    return '<div class="game-info">' + "".join(parts) + "</div>"


def render_game(state: AppState, view: GameView) -> str:
    label = f"Game #{escape(state.game_id)}" if state.game_id else "Start a new game"
    refresh = ""
    if state.game_id:
        refresh = _post_button(f"/games/{quote(state.game_id, safe='')}/refresh", "Reload", css="btn btn-small", disabled=state.fetching)
    return f"""
<main class="main-game">
  <div class="game-header">
    <span class="game-label">{label}</span>
    {refresh}
    {_post_button("/games", "+ New Game", css="btn btn-large", disabled=state.fetching)}
  </div>
  <div class="game-state-ui">
    {render_board(view)}
    {render_status(state)}
  </div>
  {render_result(state.outcome)}
</main>"""


def render_page(state: AppState, view: GameView) -> str:
    if state.user is None:
        body = f"""
<header class="App-header">
  {render_theme_toggle(state.theme)}
  <h1>{TITLE}</h1>
  <div class="subtitle">Sign up or log in to play</div>
  {render_auth_form(state)}
</header>"""
    else:
        body = f"""
<header class="App-header">
  {render_theme_toggle(state.theme)}
  <div class="navbar">
    <div class="title">{TITLE}</div>
    <div class="user-info">Logged in as <b>{escape(state.user.username)}</b>
      {_post_button("/logout", "Logout", css="btn btn-small")}
    </div>
  </div>
</header>
<div class="container">
  {render_history(state.history, state.game_id)}
  {render_game(state, view)}
</div>
<footer class="footer"><span>&copy; {date.today().year} - Online Tic Tac Toe</span></footer>"""

    return f"""<!DOCTYPE html>
<html lang="en" data-theme="{state.theme}">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{TITLE}</title>
  <link rel="stylesheet" href="/static/app.css">
</head>
<body><div class="App">{body}
</div></body>
</html>"""
