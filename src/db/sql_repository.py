"""Implementation of SessionStore using SQLAlchemy"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from src.core.exceptions import StoreError
from src.core.models import Session
from src.core.shared_types import Mark
from src.db.schema import DBStoreEntry

logger = logging.getLogger(__name__)

SESSION_KEY = "ttt-user"


class SQLSessionStore:
    """The session is kept as a JSON value under a single key."""

    def __init__(self, db_session: DBSession, key: str = SESSION_KEY) -> None:
        self.db = db_session
        self.key = key

    def load(self) -> Session | None:
        """Stored session, or None if nothing (or nothing readable) is stored."""
        try:
            entry = self._fetch_entry()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not read {self.key!r} from the local store.") from e
        if entry is None:
            return None

        session = self._to_model(entry.value)
        if session is None:
            logger.warning("Ignoring unreadable value stored under %r", self.key)
        return session

    def save(self, session: Session) -> Session:
        try:
            entry = self._fetch_entry()
            if entry is None:
                entry = DBStoreEntry(key=self.key, value=self._to_value(session))
                self.db.add(entry)
            else:
                entry.value = self._to_value(session)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Could not write {self.key!r} to the local store.") from e
        return session

    def clear(self) -> None:
        try:
            entry = self._fetch_entry()
            if entry is not None:
                self.db.delete(entry)
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Could not remove {self.key!r} from the local store.") from e

    def _fetch_entry(self) -> DBStoreEntry | None:
        query = select(DBStoreEntry).where(DBStoreEntry.key == self.key)
        return self.db.scalar(query)

    @staticmethod
    def _to_value(session: Session) -> dict[str, Any]:
        value: dict[str, Any] = {"id": session.id, "username": session.username}
        if session.mark is not None:
            value["mark"] = session.mark.value
        return value

    @staticmethod
    def _to_model(value: Any) -> Session | None:
        """Convert the stored JSON back to a Session."""
        if not isinstance(value, dict):
            return None
        user_id = value.get("id")
        username = value.get("username")
        if not isinstance(username, str) or not username:
            return None
        mark = value.get("mark")
        return Session(
            id=str(user_id) if user_id not in (None, "") else "",
            username=username,
            mark=Mark(mark) if isinstance(mark, str) and mark in Mark.__members__ else None,
        )
