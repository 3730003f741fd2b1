"""SQLite-backed account repository."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from macrolens.adapters.sqlite_db import db_conn
from macrolens.domain.accounts import Account, Goals
from macrolens.domain.errors import DuplicateAccountError, PersistenceError
from macrolens.services.accounts import AccountRepository

_COLUMNS = (
    "id, email, password_hash, name, calorie_goal, protein_goal, carbs_goal, fat_goal"
)


@dataclass
class SqliteAccountRepository(AccountRepository):
    """SQLite implementation for account persistence."""

    db_path: Path

    def create_account(self, email: str, password_hash: str, name: str) -> Account:
        """Insert an account row and return it."""
        try:
            with db_conn(self.db_path) as conn:
                cursor = conn.execute(
                    "INSERT INTO users (email, password_hash, name) VALUES (?, ?, ?)",
                    (email, password_hash, name),
                )
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE id = ?",  # noqa: S608
                    (cursor.lastrowid,),
                ).fetchone()
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc).upper():
                raise DuplicateAccountError from exc
            raise PersistenceError("Failed to create account", details=str(exc)) from exc
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to create account", details=str(exc)) from exc
        return _parse_account(row)

    def get_by_email(self, email: str) -> Account | None:
        """Return the account for an email, if present."""
        return self._fetch_one("email = ?", email)

    def get_by_id(self, account_id: int) -> Account | None:
        """Return the account for an id, if present."""
        return self._fetch_one("id = ?", account_id)

    def update_goals(self, account_id: int, goals: Goals) -> None:
        """Update the four daily targets."""
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    "UPDATE users SET calorie_goal = ?, protein_goal = ?, "
                    "carbs_goal = ?, fat_goal = ? WHERE id = ?",
                    (
                        goals.calorie_goal,
                        goals.protein_goal,
                        goals.carbs_goal,
                        goals.fat_goal,
                        account_id,
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to update goals", details=str(exc)) from exc

    def _fetch_one(self, where: str, value: object) -> Account | None:
        try:
            with db_conn(self.db_path) as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE {where}",  # noqa: S608
                    (value,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to load account", details=str(exc)) from exc
        return _parse_account(row) if row else None


def _parse_account(row: sqlite3.Row) -> Account:
    return Account(
        id=int(row["id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        goals=Goals(
            calorie_goal=row["calorie_goal"],
            protein_goal=row["protein_goal"],
            carbs_goal=row["carbs_goal"],
            fat_goal=row["fat_goal"],
        ),
    )
