"""Food analysis, food log, stats and goals endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from macrolens.api.dependencies import get_container, require_account
from macrolens.domain.accounts import Account  # noqa: TC001

if TYPE_CHECKING:
    from macrolens.containers import AppContainer

router = APIRouter(prefix="/api", tags=["nutrition"])


class AnalyzeFoodRequest(BaseModel):
    """Food photo as a data URL or bare base64 string."""

    image: str


@router.post("/analyze-food")
async def analyze_food(
    payload: AnalyzeFoodRequest,
    request: Request,
    account: Account = Depends(require_account),
) -> dict[str, object]:
    """Analyze a food photo and log the result."""
    container: AppContainer = get_container(request)
    analysis = await container.food_service.analyze(account.id, payload.image)
    return analysis.model_dump(by_alias=True)


@router.get("/logs")
def list_logs(
    request: Request, account: Account = Depends(require_account)
) -> list[dict[str, object]]:
    """Return the caller's food log, newest first."""
    container: AppContainer = get_container(request)
    return [log.to_dict() for log in container.food_service.list_logs(account.id)]


@router.get("/stats")
def stats(
    request: Request, account: Account = Depends(require_account)
) -> dict[str, object]:
    """Return today's totals and the caller's goals."""
    container: AppContainer = get_container(request)
    return container.food_service.today_stats(account.id, account.goals).to_dict()


class GoalsUpdate(BaseModel):
    """Targets to change; omitted fields keep their current value."""

    calorie_goal: int | None = Field(default=None, ge=0)
    protein_goal: int | None = Field(default=None, ge=0)
    carbs_goal: int | None = Field(default=None, ge=0)
    fat_goal: int | None = Field(default=None, ge=0)


@router.post("/goals")
def update_goals(
    payload: GoalsUpdate,
    request: Request,
    account: Account = Depends(require_account),
) -> dict[str, bool]:
    """Update the caller's daily targets."""
    container: AppContainer = get_container(request)
    goals = account.goals.model_copy(update=payload.model_dump(exclude_none=True))
    container.account_service.update_goals(account.id, goals)
    return {"success": True}
