"""Shared error handling for Supabase queries."""

from typing import Any

from postgrest.exceptions import APIError

from macrolens.domain.errors import PersistenceError


def execute(query: Any, message: str) -> Any:
    """Run a postgrest query, mapping API errors to ``PersistenceError``."""
    try:
        return query.execute()
    except APIError as exc:
        raise PersistenceError(message, details=exc.message) from exc
