"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from macrolens.adapters.openai_food_client import OpenAIFoodClient
from macrolens.adapters.openai_venue_client import OpenAIVenueClient
from macrolens.adapters.sqlite_account_repository import SqliteAccountRepository
from macrolens.adapters.sqlite_db import init_db
from macrolens.adapters.sqlite_food_log_repository import SqliteFoodLogRepository
from macrolens.adapters.sqlite_plan_repository import SqlitePlanRepository
from macrolens.adapters.sqlite_session_repository import SqliteSessionRepository
from macrolens.adapters.supabase_account_repository import SupabaseAccountRepository
from macrolens.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from macrolens.adapters.supabase_plan_repository import SupabasePlanRepository
from macrolens.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from macrolens.config import Settings
from macrolens.services.accounts import AccountRepository, AccountService
from macrolens.services.food import FoodAnalysisService, FoodLogRepository
from macrolens.services.normalizer import ExtractionMode
from macrolens.services.planner import PlannerService, PlanRepository
from macrolens.services.sessions import SessionRepository, SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    account_service: AccountService
    session_service: SessionService
    food_service: FoodAnalysisService
    planner_service: PlannerService
    close_resources: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class _Repositories:
    accounts: AccountRepository
    sessions: SessionRepository
    food_logs: FoodLogRepository
    plans: PlanRepository


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repositories = _build_repositories(resolved_settings)

    food_client = None
    venue_client = None
    if resolved_settings.openai_api_key:
        food_client = OpenAIFoodClient.create(resolved_settings.openai_api_key)
        venue_client = OpenAIVenueClient.create(resolved_settings.openai_api_key)

    account_service = AccountService(repositories.accounts)
    session_service = SessionService(
        repository=repositories.sessions,
        secret=resolved_settings.resolved_session_secret(),
        max_age_seconds=resolved_settings.session_max_age_seconds,
    )
    food_service = FoodAnalysisService(
        client=food_client,
        repository=repositories.food_logs,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        mode=ExtractionMode(resolved_settings.food_extraction_mode),
    )
    planner_service = PlannerService(
        client=venue_client,
        repository=repositories.plans,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        mode=ExtractionMode(resolved_settings.planner_extraction_mode),
    )

    async def close_resources() -> None:
        if food_client is not None:
            await food_client.close()
        if venue_client is not None:
            await venue_client.close()

    return AppContainer(
        settings=resolved_settings,
        account_service=account_service,
        session_service=session_service,
        food_service=food_service,
        planner_service=planner_service,
        close_resources=close_resources,
    )


def _build_repositories(settings: Settings) -> _Repositories:
    if settings.storage_backend == "supabase":
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return _Repositories(
            accounts=SupabaseAccountRepository(client),
            sessions=SupabaseSessionRepository(client),
            food_logs=SupabaseFoodLogRepository(client),
            plans=SupabasePlanRepository(client),
        )

    db_path = Path(settings.database_path).expanduser()
    init_db(db_path)
    return _Repositories(
        accounts=SqliteAccountRepository(db_path),
        sessions=SqliteSessionRepository(db_path),
        food_logs=SqliteFoodLogRepository(db_path),
        plans=SqlitePlanRepository(db_path),
    )
