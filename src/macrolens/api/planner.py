"""Venue planning and plan history endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from macrolens.api.dependencies import get_container, require_account
from macrolens.domain.accounts import Account  # noqa: TC001
from macrolens.domain.venues import Location

if TYPE_CHECKING:
    from macrolens.containers import AppContainer

router = APIRouter(prefix="/api", tags=["planner"])


class PlanRequest(BaseModel):
    """Free-text request plus optional caller position."""

    prompt: str = Field(min_length=1, max_length=2000)
    location: Location | None = None


@router.post("/plan")
async def create_plan(
    payload: PlanRequest,
    request: Request,
    account: Account = Depends(require_account),
) -> dict[str, object]:
    """Find venues for the prompt and store the plan."""
    container: AppContainer = get_container(request)
    plan = await container.planner_service.plan(
        account.id, payload.prompt, payload.location
    )
    return plan.to_dict()


@router.get("/history")
def history(
    request: Request, account: Account = Depends(require_account)
) -> list[dict[str, object]]:
    """Return the caller's plans, newest first."""
    container: AppContainer = get_container(request)
    return [plan.to_dict() for plan in container.planner_service.history(account.id)]
