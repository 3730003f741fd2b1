"""SQLite-backed session repository."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from macrolens.adapters.sqlite_db import db_conn, from_db_timestamp, to_db_timestamp
from macrolens.domain.errors import PersistenceError
from macrolens.domain.sessions import SessionRecord
from macrolens.services.sessions import SessionRepository


@dataclass
class SqliteSessionRepository(SessionRepository):
    """SQLite implementation for login sessions."""

    db_path: Path

    def create_session(
        self, session_id: str, account_id: int, expires_at: datetime
    ) -> SessionRecord:
        """Insert a session row."""
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO sessions (id, user_id, expires_at) VALUES (?, ?, ?)",
                    (session_id, account_id, to_db_timestamp(expires_at)),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to create session", details=str(exc)) from exc
        return SessionRecord(id=session_id, account_id=account_id, expires_at=expires_at)

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session row by id."""
        try:
            with db_conn(self.db_path) as conn:
                row = conn.execute(
                    "SELECT id, user_id, expires_at FROM sessions WHERE id = ?",
                    (session_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to load session", details=str(exc)) from exc
        if row is None:
            return None
        return SessionRecord(
            id=row["id"],
            account_id=int(row["user_id"]),
            expires_at=from_db_timestamp(row["expires_at"]),
        )

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        try:
            with db_conn(self.db_path) as conn:
                conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to delete session", details=str(exc)) from exc

    def delete_expired_sessions(self, now: datetime) -> None:
        """Delete every session that expired at or before ``now``."""
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    "DELETE FROM sessions WHERE expires_at <= ?", (to_db_timestamp(now),)
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to purge sessions", details=str(exc)) from exc
