"""Protocol for the session store (SQLAlchemy today, anything key-value shaped later)"""

from typing import Protocol

from src.core.models import Session


class SessionStore(Protocol):
    """Persistence of the single logged-in user between runs."""

    def load(self) -> Session | None:
        """Stored session, if there is a usable one."""
        ...

    def save(self, session: Session) -> Session:
        """Store the session, replacing any previous one."""
        ...

    def clear(self) -> None:
        """Forget the stored session."""
        ...
