"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from macrolens.api.app import create_app
from macrolens.config import Settings
from macrolens.containers import AppContainer
from macrolens.domain.accounts import Account, Goals
from macrolens.domain.errors import DuplicateAccountError
from macrolens.domain.food import FoodAnalysis, FoodLogRecord
from macrolens.domain.sessions import SessionRecord
from macrolens.domain.venues import Location, Venue, VenuePlan
from macrolens.services.accounts import AccountRepository, AccountService
from macrolens.services.food import FoodAnalysisClient, FoodAnalysisService, FoodLogRepository
from macrolens.services.normalizer import ExtractionMode
from macrolens.services.planner import (
    PlannerService,
    PlanRepository,
    ProviderReply,
    VenueSearchClient,
)
from macrolens.services.sessions import SessionRepository, SessionService

FOOD_REPLY = json.dumps(
    {"foodName": "Chicken salad", "calories": 420, "protein": 35, "carbs": 12, "fat": 24}
)
VENUE_REPLY = (
    "Here are some places you might like:\n"
    '[{"name": "Loft 21", "rating": 4.6, "description": "Rooftop bar", '
    '"address": "21 Main St"}, '
    '{"name": "The Cellar", "rating": 4.2, "description": "Private rooms", '
    '"address": "5 Oak Ave", "website": "https://cellar.example"}]\n'
    "Enjoy the party!"
)
PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


@dataclass
class InMemoryAccountRepository(AccountRepository):
    """In-memory account repository for tests."""

    accounts: dict[int, Account] = field(default_factory=dict)

    def create_account(self, email: str, password_hash: str, name: str) -> Account:
        if any(account.email == email for account in self.accounts.values()):
            raise DuplicateAccountError
        account = Account(
            id=len(self.accounts) + 1,
            email=email,
            name=name,
            password_hash=password_hash,
            goals=Goals(),
        )
        self.accounts[account.id] = account
        return account

    def get_by_email(self, email: str) -> Account | None:
        for account in self.accounts.values():
            if account.email == email:
                return account
        return None

    def get_by_id(self, account_id: int) -> Account | None:
        return self.accounts.get(account_id)

    def update_goals(self, account_id: int, goals: Goals) -> None:
        current = self.accounts[account_id]
        self.accounts[account_id] = Account(
            id=current.id,
            email=current.email,
            name=current.name,
            password_hash=current.password_hash,
            goals=goals,
        )


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, SessionRecord] = field(default_factory=dict)

    def create_session(
        self, session_id: str, account_id: int, expires_at: datetime
    ) -> SessionRecord:
        session = SessionRecord(
            id=session_id, account_id=account_id, expires_at=expires_at
        )
        self.sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def delete_expired_sessions(self, now: datetime) -> None:
        self.sessions = {
            session_id: session
            for session_id, session in self.sessions.items()
            if session.expires_at > now
        }


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    logs: list[FoodLogRecord] = field(default_factory=list)

    def create_food_log(
        self, account_id: int, analysis: FoodAnalysis, image_url: str
    ) -> FoodLogRecord:
        record = FoodLogRecord(
            id=len(self.logs) + 1,
            account_id=account_id,
            food_name=analysis.food_name,
            calories=analysis.calories,
            protein=analysis.protein,
            carbs=analysis.carbs,
            fat=analysis.fat,
            image_url=image_url,
            created_at=datetime.now(tz=UTC),
        )
        self.logs.append(record)
        return record

    def list_food_logs(self, account_id: int) -> list[FoodLogRecord]:
        owned = [log for log in self.logs if log.account_id == account_id]
        return sorted(owned, key=lambda log: (log.created_at, log.id), reverse=True)

    def list_food_logs_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        return [
            log
            for log in self.logs
            if log.account_id == account_id and start <= log.created_at < end
        ]


@dataclass
class InMemoryPlanRepository(PlanRepository):
    """In-memory plan repository for tests."""

    plans: list[VenuePlan] = field(default_factory=list)

    def create_plan(self, account_id: int, prompt: str, venues: list[Venue]) -> VenuePlan:
        plan = VenuePlan(
            id=len(self.plans) + 1,
            account_id=account_id,
            prompt=prompt,
            venues=venues,
            created_at=datetime.now(tz=UTC),
        )
        self.plans.append(plan)
        return plan

    def list_plans(self, account_id: int) -> list[VenuePlan]:
        owned = [plan for plan in self.plans if plan.account_id == account_id]
        return sorted(owned, key=lambda plan: (plan.created_at, plan.id), reverse=True)


@dataclass
class FakeFoodClient(FoodAnalysisClient):
    """Fake food analysis client returning a fixed text."""

    text: str = FOOD_REPLY
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
        schema: dict[str, object] | None,
    ) -> str:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "schema": schema}
        )
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeVenueClient(VenueSearchClient):
    """Fake venue search client returning a fixed reply."""

    text: str = VENUE_REPLY
    references: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def search(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        location: Location | None,
        schema: dict[str, object] | None,
    ) -> ProviderReply:
        self.calls.append({"prompt": prompt, "location": location, "schema": schema})
        if self.error is not None:
            raise self.error
        return ProviderReply(text=self.text, references=list(self.references))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        session_secret="test-secret",
        openai_api_key="openai-key",
        database_path=":memory:",
    )


def _build_container(settings: Settings) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        account_service=AccountService(InMemoryAccountRepository()),
        session_service=SessionService(
            repository=InMemorySessionRepository(),
            secret=settings.resolved_session_secret(),
            max_age_seconds=settings.session_max_age_seconds,
        ),
        food_service=FoodAnalysisService(
            client=FakeFoodClient(),
            repository=InMemoryFoodLogRepository(),
            model=settings.openai_model,
            mode=ExtractionMode(settings.food_extraction_mode),
        ),
        planner_service=PlannerService(
            client=FakeVenueClient(),
            repository=InMemoryPlanRepository(),
            model=settings.openai_model,
            mode=ExtractionMode(settings.planner_extraction_mode),
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return _build_container(settings)


@pytest.fixture
def planner_container(settings: Settings) -> AppContainer:
    return _build_container(settings.model_copy(update={"app_variant": "planner"}))


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    # Session cookies are Secure, so the client must talk https.
    return TestClient(create_app(container), base_url="https://testserver")


@pytest.fixture
def planner_client(planner_container: AppContainer) -> TestClient:
    return TestClient(create_app(planner_container), base_url="https://testserver")


def signup(client: TestClient, email: str = "a@x.com", name: str = "A") -> dict:
    """Sign up through the API and return the response body."""
    response = client.post(
        "/api/auth/signup", json={"email": email, "password": "p", "name": name}
    )
    assert response.status_code == 200
    return response.json()
