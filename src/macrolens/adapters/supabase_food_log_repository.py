"""Supabase repository for food log entries."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from macrolens.adapters.supabase_query import execute
from macrolens.domain.errors import PersistenceError
from macrolens.domain.food import FoodAnalysis, FoodLogRecord
from macrolens.services.food import FoodLogRepository

_COLUMNS = "id, user_id, food_name, calories, protein, carbs, fat, image_url, created_at"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food logs."""

    client: Client

    def create_food_log(
        self, account_id: int, analysis: FoodAnalysis, image_url: str
    ) -> FoodLogRecord:
        """Insert a food log row and return it."""
        response = execute(
            self.client.table("food_logs").insert(
                {
                    "user_id": account_id,
                    "food_name": analysis.food_name,
                    "calories": analysis.calories,
                    "protein": analysis.protein,
                    "carbs": analysis.carbs,
                    "fat": analysis.fat,
                    "image_url": image_url,
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            ),
            "Failed to save food log",
        )
        if not response.data:
            raise PersistenceError("Failed to save food log")
        return _parse_row(response.data[0])

    def list_food_logs(self, account_id: int) -> list[FoodLogRecord]:
        """Return an account's food logs, newest first."""
        response = execute(
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", account_id)
            .order("created_at", desc=True),
            "Failed to load food logs",
        )
        return [_parse_row(row) for row in response.data or []]

    def list_food_logs_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        """Return an account's food logs in [start, end)."""
        response = execute(
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", account_id)
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .order("created_at", desc=False),
            "Failed to load food logs",
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> FoodLogRecord:
    return FoodLogRecord(
        id=int(row["id"]),
        account_id=int(row["user_id"]),
        food_name=row.get("food_name"),
        calories=_optional_float(row.get("calories")),
        protein=_optional_float(row.get("protein")),
        carbs=_optional_float(row.get("carbs")),
        fat=_optional_float(row.get("fat")),
        image_url=row.get("image_url"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
