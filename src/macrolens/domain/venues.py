"""Domain models for venue planning."""

import json
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Caller position used to bias grounding."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Venue(BaseModel):
    """Single venue suggestion."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    rating: float | None = None
    description: str | None = None
    address: str | None = None
    website: str | None = None
    maps_uri: str | None = Field(default=None, alias="mapsUri")


@dataclass(frozen=True)
class VenuePlan:
    """Immutable plan record: the prompt and the venues it produced."""

    id: int
    account_id: int
    prompt: str
    venues: list[Venue]
    created_at: datetime

    def to_dict(self) -> dict[str, object]:
        """Return the wire shape used by the plan endpoints."""
        return {
            "id": self.id,
            "prompt": self.prompt,
            "venues": [
                venue.model_dump(by_alias=True, exclude_none=True)
                for venue in self.venues
            ],
            "created_at": self.created_at.isoformat(),
        }


def dump_venues(venues: list[Venue]) -> str:
    """Serialize venues for storage."""
    return json.dumps(
        [venue.model_dump(by_alias=True, exclude_none=True) for venue in venues]
    )


def load_venues(raw: str | list[object] | None) -> list[Venue]:
    """Deserialize stored venues from JSON text or an already decoded list."""
    items = json.loads(raw) if isinstance(raw, str) else raw or []
    return [Venue.model_validate(item) for item in items]
