"""Venue planning from a free-text prompt."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import ValidationError

from macrolens.domain.errors import (
    BadRequestError,
    NoResultsError,
    NotConfiguredError,
    ProviderUnavailableError,
    UnexpectedProviderResponseError,
)
from macrolens.domain.venues import Location, Venue, VenuePlan
from macrolens.services.normalizer import (
    ExtractionMode,
    attach_references,
    extract_json_array,
    parse_schema_output,
)

logger = logging.getLogger(__name__)

PLANNER_RULES = (
    "Find real venues that match the request below. "
    "Return only a JSON array of objects with the keys name, rating (number "
    "out of 5), description, address and website. Do not add any other text."
)
FAILURE_MESSAGE = "Failed to plan"

_VENUE_ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "rating": {"anyOf": [{"type": "number"}, {"type": "null"}]},
        "description": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "address": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "website": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["name", "rating", "description", "address", "website"],
    "additionalProperties": False,
}

VENUES_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {"venues": {"type": "array", "items": _VENUE_ITEM_SCHEMA}},
    "required": ["venues"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ProviderReply:
    """Provider text plus side-channel grounding references, in output order."""

    text: str
    references: list[str] = field(default_factory=list)


class VenueSearchClient(Protocol):
    """Interface for the AI provider call behind venue planning."""

    async def search(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        location: Location | None,
        schema: dict[str, object] | None,
    ) -> ProviderReply:
        """Return the provider's raw reply."""


class PlanRepository(Protocol):
    """Persistence interface for venue plans."""

    def create_plan(self, account_id: int, prompt: str, venues: list[Venue]) -> VenuePlan:
        """Insert one plan."""

    def list_plans(self, account_id: int) -> list[VenuePlan]:
        """Return an account's plans, newest first."""


@dataclass
class PlannerService:
    """Turns a prompt into venue suggestions and records them."""

    client: VenueSearchClient | None
    repository: PlanRepository
    model: str
    store: bool = False
    mode: ExtractionMode = ExtractionMode.FREE_TEXT

    async def plan(
        self, account_id: int, prompt: str, location: Location | None = None
    ) -> VenuePlan:
        """Search venues for the prompt and append the plan to history."""
        if self.client is None:
            raise NotConfiguredError
        query = prompt.strip()
        if not query:
            raise BadRequestError("Prompt is required")
        schema_mode = self.mode == ExtractionMode.SCHEMA
        try:
            reply = await self.client.search(
                model=self.model,
                store=self.store,
                prompt=f"{PLANNER_RULES}\n\nRequest: {query}",
                location=location,
                schema=VENUES_SCHEMA if schema_mode else None,
            )
            venues = self._normalize(reply)
        except (ProviderUnavailableError, UnexpectedProviderResponseError) as exc:
            logger.exception("Venue planning failed for account %s", account_id)
            raise type(exc)(FAILURE_MESSAGE, details=exc.details) from exc

        if not venues:
            raise NoResultsError
        plan = self.repository.create_plan(account_id, query, venues)
        logger.info(
            "Stored plan for account %s with %d venues", account_id, len(venues)
        )
        return plan

    def history(self, account_id: int) -> list[VenuePlan]:
        """Return the account's plans, newest first."""
        return self.repository.list_plans(account_id)

    def _normalize(self, reply: ProviderReply) -> list[Venue]:
        if self.mode == ExtractionMode.SCHEMA:
            raw_items = parse_schema_output(reply.text).get("venues")
            if not isinstance(raw_items, list):
                raise UnexpectedProviderResponseError(
                    details="Provider output has no venues list"
                )
        else:
            raw_items = extract_json_array(reply.text)
        return _validate_venues(attach_references(raw_items, reply.references))


def _validate_venues(items: list[object]) -> list[Venue]:
    venues = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            venues.append(Venue.model_validate(item))
        except ValidationError:
            logger.info("Skipping malformed venue item")
    return venues
