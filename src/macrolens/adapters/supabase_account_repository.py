"""Supabase-backed account repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from macrolens.adapters.supabase_query import execute
from macrolens.domain.accounts import Account, Goals
from macrolens.domain.errors import DuplicateAccountError, PersistenceError
from macrolens.services.accounts import AccountRepository

_UNIQUE_VIOLATION = "23505"
_COLUMNS = (
    "id, email, password_hash, name, calorie_goal, protein_goal, carbs_goal, fat_goal"
)


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for account persistence."""

    client: Client

    def create_account(self, email: str, password_hash: str, name: str) -> Account:
        """Create a new account row and return it."""
        try:
            response = (
                self.client.table("users")
                .insert({"email": email, "password_hash": password_hash, "name": name})
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateAccountError from exc
            raise PersistenceError("Failed to create account", details=exc.message) from exc
        if not response.data:
            raise PersistenceError("Failed to create account in Supabase")
        return _parse_account(response.data[0])

    def get_by_email(self, email: str) -> Account | None:
        """Return the account for an email, if present."""
        response = execute(
            self.client.table("users").select(_COLUMNS).eq("email", email).limit(1),
            "Failed to load account",
        )
        if response.data:
            return _parse_account(response.data[0])
        return None

    def get_by_id(self, account_id: int) -> Account | None:
        """Return the account for an id, if present."""
        response = execute(
            self.client.table("users").select(_COLUMNS).eq("id", account_id).limit(1),
            "Failed to load account",
        )
        if response.data:
            return _parse_account(response.data[0])
        return None

    def update_goals(self, account_id: int, goals: Goals) -> None:
        """Update the four daily targets."""
        execute(
            self.client.table("users").update(goals.model_dump()).eq("id", account_id),
            "Failed to update goals",
        )


def _parse_account(row: dict[str, object]) -> Account:
    return Account(
        id=int(row["id"]),
        email=str(row["email"]),
        name=str(row.get("name") or ""),
        password_hash=str(row.get("password_hash") or ""),
        goals=Goals.model_validate(
            {
                key: row[key]
                for key in ("calorie_goal", "protein_goal", "carbs_goal", "fat_goal")
                if row.get(key) is not None
            }
        ),
    )
