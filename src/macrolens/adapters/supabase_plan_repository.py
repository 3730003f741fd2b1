"""Supabase repository for venue plans."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from macrolens.adapters.supabase_query import execute
from macrolens.domain.errors import PersistenceError
from macrolens.domain.venues import Venue, VenuePlan, load_venues
from macrolens.services.planner import PlanRepository


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Supabase implementation for venue plans.

    Venues are stored in a ``jsonb`` column, so rows come back already decoded.
    """

    client: Client

    def create_plan(self, account_id: int, prompt: str, venues: list[Venue]) -> VenuePlan:
        """Insert a plan row and return it."""
        response = execute(
            self.client.table("plans").insert(
                {
                    "user_id": account_id,
                    "prompt": prompt,
                    "venues_json": [
                        venue.model_dump(by_alias=True, exclude_none=True)
                        for venue in venues
                    ],
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            ),
            "Failed to save plan",
        )
        if not response.data:
            raise PersistenceError("Failed to save plan")
        return _parse_row(response.data[0])

    def list_plans(self, account_id: int) -> list[VenuePlan]:
        """Return an account's plans, newest first."""
        response = execute(
            self.client.table("plans")
            .select("id, user_id, prompt, venues_json, created_at")
            .eq("user_id", account_id)
            .order("created_at", desc=True),
            "Failed to load plans",
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> VenuePlan:
    return VenuePlan(
        id=int(row["id"]),
        account_id=int(row["user_id"]),
        prompt=str(row.get("prompt") or ""),
        venues=load_venues(row.get("venues_json")),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
