"""
Type definitions used across layers
"""

from enum import StrEnum


class Mark(StrEnum):
    X = "X"
    O = "O"  # noqa: E741


class OutcomeKind(StrEnum):
    NONE = "none"
    WIN = "win"
    DRAW = "draw"


# --- The backend reports a finished game either with the winning mark or with this literal
DRAW = "draw"


class SessionPhase(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_IDLE = "authenticated idle"
    GAME_ACTIVE = "game active"
    GAME_CONCLUDED = "game concluded"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.DARK if self == Theme.LIGHT else Theme.LIGHT
