"""SQLite repository for food log entries."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from macrolens.adapters.sqlite_db import db_conn, from_db_timestamp, to_db_timestamp
from macrolens.domain.errors import PersistenceError
from macrolens.domain.food import FoodAnalysis, FoodLogRecord
from macrolens.services.food import FoodLogRepository

_COLUMNS = "id, user_id, food_name, calories, protein, carbs, fat, image_url, created_at"


@dataclass
class SqliteFoodLogRepository(FoodLogRepository):
    """SQLite implementation for food logs."""

    db_path: Path

    def create_food_log(
        self, account_id: int, analysis: FoodAnalysis, image_url: str
    ) -> FoodLogRecord:
        """Insert a food log row and return it."""
        created_at = datetime.now(tz=UTC)
        try:
            with db_conn(self.db_path) as conn:
                cursor = conn.execute(
                    "INSERT INTO food_logs (user_id, food_name, calories, protein, "
                    "carbs, fat, image_url, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        account_id,
                        analysis.food_name,
                        analysis.calories,
                        analysis.protein,
                        analysis.carbs,
                        analysis.fat,
                        image_url,
                        to_db_timestamp(created_at),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to save food log", details=str(exc)) from exc
        return FoodLogRecord(
            id=int(cursor.lastrowid),
            account_id=account_id,
            food_name=analysis.food_name,
            calories=analysis.calories,
            protein=analysis.protein,
            carbs=analysis.carbs,
            fat=analysis.fat,
            image_url=image_url,
            created_at=created_at,
        )

    def list_food_logs(self, account_id: int) -> list[FoodLogRecord]:
        """Return an account's food logs, newest first."""
        return self._select(
            "user_id = ? ORDER BY created_at DESC, id DESC", (account_id,)
        )

    def list_food_logs_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        """Return an account's food logs in [start, end)."""
        return self._select(
            "user_id = ? AND created_at >= ? AND created_at < ? ORDER BY created_at",
            (account_id, to_db_timestamp(start), to_db_timestamp(end)),
        )

    def _select(self, clause: str, params: tuple[object, ...]) -> list[FoodLogRecord]:
        try:
            with db_conn(self.db_path) as conn:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM food_logs WHERE {clause}",  # noqa: S608
                    params,
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError("Failed to load food logs", details=str(exc)) from exc
        return [_parse_row(row) for row in rows]


def _parse_row(row: sqlite3.Row) -> FoodLogRecord:
    return FoodLogRecord(
        id=int(row["id"]),
        account_id=int(row["user_id"]),
        food_name=row["food_name"],
        calories=row["calories"],
        protein=row["protein"],
        carbs=row["carbs"],
        fat=row["fat"],
        image_url=row["image_url"],
        created_at=from_db_timestamp(row["created_at"]),
    )
