"""Domain models for food analysis and logging."""

from dataclasses import dataclass
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class FoodAnalysis(BaseModel):
    """Normalized food analysis returned by the AI provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    food_name: str | None = Field(default=None, alias="foodName")
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


@dataclass(frozen=True)
class FoodLogRecord:
    """Immutable food log entry attributed to one account."""

    id: int
    account_id: int
    food_name: str | None
    calories: float | None
    protein: float | None
    carbs: float | None
    fat: float | None
    image_url: str | None
    created_at: datetime

    def to_dict(self) -> dict[str, object]:
        """Return the row shape served by the logs endpoint."""
        return {
            "id": self.id,
            "user_id": self.account_id,
            "food_name": self.food_name,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class DailyTotals:
    """Summed macros for one day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
