"""Domain models for login sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted login session."""

    id: str
    account_id: int
    expires_at: datetime
