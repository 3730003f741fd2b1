"""SQLite repository for venue plans."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from macrolens.adapters.sqlite_db import db_conn, from_db_timestamp, to_db_timestamp
from macrolens.domain.errors import PersistenceError
from macrolens.domain.venues import Venue, VenuePlan, dump_venues, load_venues
from macrolens.services.planner import PlanRepository


@dataclass
class SqlitePlanRepository(PlanRepository):
    """SQLite implementation for venue plans."""

    db_path: Path

    def create_plan(self, account_id: int, prompt: str, venues: list[Venue]) -> VenuePlan:
        """Insert a plan row and return it."""
        created_at = datetime.now(tz=UTC)
        try:
            with db_conn(self.db_path) as conn:
                cursor = conn.execute(
                    "INSERT INTO plans (user_id, prompt, venues_json, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (
                        account_id,
                        prompt,
                        dump_venues(venues),
                        to_db_timestamp(created_at),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to save plan", details=str(exc)) from exc
        return VenuePlan(
            id=int(cursor.lastrowid),
            account_id=account_id,
            prompt=prompt,
            venues=venues,
            created_at=created_at,
        )

    def list_plans(self, account_id: int) -> list[VenuePlan]:
        """Return an account's plans, newest first."""
        try:
            with db_conn(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT id, user_id, prompt, venues_json, created_at FROM plans "
                    "WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                    (account_id,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to load plans", details=str(exc)) from exc
        return [
            VenuePlan(
                id=int(row["id"]),
                account_id=int(row["user_id"]),
                prompt=row["prompt"],
                venues=load_venues(row["venues_json"]),
                created_at=from_db_timestamp(row["created_at"]),
            )
            for row in rows
        ]
