"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from macrolens.adapters.supabase_query import execute
from macrolens.domain.errors import PersistenceError
from macrolens.domain.sessions import SessionRecord
from macrolens.services.sessions import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for login sessions."""

    client: Client

    def create_session(
        self, session_id: str, account_id: int, expires_at: datetime
    ) -> SessionRecord:
        """Insert a session row."""
        response = execute(
            self.client.table("sessions").insert(
                {
                    "id": session_id,
                    "user_id": account_id,
                    "expires_at": expires_at.isoformat(),
                }
            ),
            "Failed to create session",
        )
        if not response.data:
            raise PersistenceError("Failed to create session in Supabase")
        return SessionRecord(id=session_id, account_id=account_id, expires_at=expires_at)

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session row by id."""
        response = execute(
            self.client.table("sessions")
            .select("id, user_id, expires_at")
            .eq("id", session_id)
            .limit(1),
            "Failed to load session",
        )
        if not response.data:
            return None
        row = response.data[0]
        return SessionRecord(
            id=str(row["id"]),
            account_id=int(row["user_id"]),
            expires_at=datetime.fromisoformat(str(row["expires_at"])),
        )

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        execute(
            self.client.table("sessions").delete().eq("id", session_id),
            "Failed to delete session",
        )

    def delete_expired_sessions(self, now: datetime) -> None:
        """Delete every session that expired at or before ``now``."""
        execute(
            self.client.table("sessions").delete().lte("expires_at", now.isoformat()),
            "Failed to purge sessions",
        )
