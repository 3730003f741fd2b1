"""Food photo analysis, food log and daily stats."""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

from pydantic import ValidationError

from macrolens.domain.accounts import Goals
from macrolens.domain.errors import (
    BadRequestError,
    NoResultsError,
    NotConfiguredError,
    ProviderUnavailableError,
    UnexpectedProviderResponseError,
)
from macrolens.domain.food import DailyTotals, FoodAnalysis, FoodLogRecord
from macrolens.services.normalizer import (
    ExtractionMode,
    extract_json_object,
    parse_schema_output,
)

logger = logging.getLogger(__name__)

FOOD_PROMPT = (
    "Analyze this food image and estimate the calories and macros "
    "(protein, carbs, fat). Provide a name for the food. Return strictly as JSON."
)
FREE_TEXT_RULES = (
    " Return only a JSON object with the keys foodName (string), calories, "
    "protein, carbs and fat (numbers, grams for macros). No other text."
)
FAILURE_MESSAGE = "Failed to analyze food"
NO_FOOD_MESSAGE = "Could not identify any food. Try another photo."

FOOD_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "foodName": {"type": "string"},
        "calories": {"type": "number"},
        "protein": {"type": "number"},
        "carbs": {"type": "number"},
        "fat": {"type": "number"},
    },
    "required": ["foodName", "calories", "protein", "carbs", "fat"],
    "additionalProperties": False,
}


class FoodAnalysisClient(Protocol):
    """Interface for the AI provider call behind food analysis."""

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
        schema: dict[str, object] | None,
    ) -> str:
        """Return the provider's raw text output."""


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_food_log(
        self, account_id: int, analysis: FoodAnalysis, image_url: str
    ) -> FoodLogRecord:
        """Insert one food log entry."""

    def list_food_logs(self, account_id: int) -> list[FoodLogRecord]:
        """Return an account's entries, newest first."""

    def list_food_logs_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        """Return an account's entries created in [start, end)."""


@dataclass(frozen=True)
class StatsSnapshot:
    """Today's totals next to the account goals."""

    current: DailyTotals
    goals: Goals

    def to_dict(self) -> dict[str, object]:
        """Return the wire shape served by the stats endpoint."""
        return {
            "current": {
                "totalCalories": self.current.calories,
                "totalProtein": self.current.protein,
                "totalCarbs": self.current.carbs,
                "totalFat": self.current.fat,
            },
            "goals": self.goals.model_dump(),
        }


@dataclass
class FoodAnalysisService:
    """Runs food analysis and records the result."""

    client: FoodAnalysisClient | None
    repository: FoodLogRepository
    model: str
    store: bool = False
    mode: ExtractionMode = ExtractionMode.SCHEMA

    async def analyze(self, account_id: int, image: str) -> FoodAnalysis:
        """Analyze a food image and append it to the account's log."""
        if self.client is None:
            raise NotConfiguredError
        data_url = to_data_url(image)
        schema_mode = self.mode == ExtractionMode.SCHEMA
        try:
            text = await self.client.analyze(
                model=self.model,
                store=self.store,
                image_data_url=data_url,
                prompt=FOOD_PROMPT if schema_mode else FOOD_PROMPT + FREE_TEXT_RULES,
                schema=FOOD_SCHEMA if schema_mode else None,
            )
            analysis = self._normalize(text)
        except (ProviderUnavailableError, UnexpectedProviderResponseError) as exc:
            logger.exception("Food analysis failed for account %s", account_id)
            raise type(exc)(FAILURE_MESSAGE, details=exc.details) from exc

        self.repository.create_food_log(account_id, analysis, data_url)
        logger.info("Logged food analysis for account %s", account_id)
        return analysis

    def list_logs(self, account_id: int) -> list[FoodLogRecord]:
        """Return the account's food log, newest first."""
        return self.repository.list_food_logs(account_id)

    def today_stats(self, account_id: int, goals: Goals) -> StatsSnapshot:
        """Return today's (UTC) totals for the account."""
        now = datetime.now(tz=UTC)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        logs = self.repository.list_food_logs_between(account_id, start, end)
        return StatsSnapshot(current=_aggregate_day(start.date(), logs), goals=goals)

    def _normalize(self, text: str) -> FoodAnalysis:
        if self.mode == ExtractionMode.SCHEMA:
            payload = parse_schema_output(text)
        else:
            payload = extract_json_object(text)
            if not payload:
                raise NoResultsError(NO_FOOD_MESSAGE)
        try:
            analysis = FoodAnalysis.model_validate(payload)
        except ValidationError as exc:
            raise UnexpectedProviderResponseError(
                details=f"Provider output failed validation: {exc.error_count()} error(s)"
            ) from exc
        if self.mode == ExtractionMode.FREE_TEXT and not analysis.model_dump(
            exclude_none=True
        ):
            raise NoResultsError(NO_FOOD_MESSAGE)
        return analysis


def to_data_url(image: str) -> str:
    """Return the image as a data URL, wrapping bare base64 as JPEG."""
    value = (image or "").strip()
    if value.startswith("data:"):
        header, _, encoded = value.partition(",")
        if not header.endswith(";base64"):
            raise BadRequestError("Image must be base64 encoded")
    else:
        header, encoded = "data:image/jpeg;base64", value
    if not encoded:
        raise BadRequestError("Image is required")
    try:
        base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadRequestError("Image is not valid base64") from exc
    return f"{header},{encoded}"


def _aggregate_day(day: date, logs: list[FoodLogRecord]) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fat=0)
    for log in logs:
        if log.created_at.astimezone(UTC).date() != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + (log.calories or 0),
            protein=total.protein + (log.protein or 0),
            carbs=total.carbs + (log.carbs or 0),
            fat=total.fat + (log.fat or 0),
        )
    return total
