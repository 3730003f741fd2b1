"""Server-side login sessions behind a signed cookie."""

import hashlib
import hmac
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from macrolens.domain.sessions import SessionRecord


class SessionRepository(Protocol):
    """Persistence interface for login sessions."""

    def create_session(
        self, session_id: str, account_id: int, expires_at: datetime
    ) -> SessionRecord:
        """Store a new session row."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session row by id."""

    def delete_session(self, session_id: str) -> None:
        """Remove a session row if it exists."""

    def delete_expired_sessions(self, now: datetime) -> None:
        """Remove every session that expired at or before ``now``."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Issues, resolves and destroys sessions.

    The cookie value is ``<session id>.<hex hmac-sha256 of the id>``. The
    expiry is fixed when the session is created and never extended. Expired
    rows are purged whenever a new session starts.
    """

    repository: SessionRepository
    secret: str
    max_age_seconds: int = 24 * 60 * 60
    clock: Callable[[], datetime] = field(default=_utc_now)

    def create(self, account_id: int) -> str:
        """Start a session for the account and return the cookie value."""
        session_id = secrets.token_urlsafe(32)
        now = self.clock()
        self.repository.delete_expired_sessions(now)
        expires_at = now + timedelta(seconds=self.max_age_seconds)
        self.repository.create_session(session_id, account_id, expires_at)
        return f"{session_id}.{self._sign(session_id)}"

    def resolve(self, cookie_value: str | None) -> int | None:
        """Return the account id behind a cookie, or None."""
        session_id = self._unsign(cookie_value)
        if session_id is None:
            return None
        session = self.repository.get_session(session_id)
        if session is None:
            return None
        if session.expires_at <= self.clock():
            self.repository.delete_session(session_id)
            return None
        return session.account_id

    def destroy(self, cookie_value: str | None) -> None:
        """Delete the session behind a cookie; no-op for unknown cookies."""
        session_id = self._unsign(cookie_value)
        if session_id is not None:
            self.repository.delete_session(session_id)

    def _sign(self, session_id: str) -> str:
        return hmac.new(
            self.secret.encode("utf-8"), session_id.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def _unsign(self, cookie_value: str | None) -> str | None:
        if not cookie_value or "." not in cookie_value:
            return None
        session_id, signature = cookie_value.rsplit(".", 1)
        expected = self._sign(session_id).encode("ascii")
        if not hmac.compare_digest(signature.encode("utf-8"), expected):
            return None
        return session_id
