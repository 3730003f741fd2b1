"""Tests for venue planning service."""

import asyncio
import json
import logging

import pytest

from macrolens.domain.errors import (
    BadRequestError,
    NoResultsError,
    NotConfiguredError,
    ProviderUnavailableError,
    UnexpectedProviderResponseError,
)
from macrolens.domain.venues import Location
from macrolens.services.normalizer import ExtractionMode
from macrolens.services.planner import VENUES_SCHEMA, PlannerService
from tests.conftest import FakeVenueClient, InMemoryPlanRepository


def _service(
    client: FakeVenueClient | None = None,
    mode: ExtractionMode = ExtractionMode.FREE_TEXT,
) -> PlannerService:
    return PlannerService(
        client=client if client is not None else FakeVenueClient(),
        repository=InMemoryPlanRepository(),
        model="gpt-test",
        mode=mode,
    )


def test_plan_extracts_venues_and_persists_plan() -> None:
    service = _service()

    plan = asyncio.run(service.plan(3, "  birthday party for 20  "))

    assert [venue.name for venue in plan.venues] == ["Loft 21", "The Cellar"]
    assert plan.venues[1].website == "https://cellar.example"
    assert plan.prompt == "birthday party for 20"
    assert service.repository.plans == [plan]


def test_plan_passes_location_to_client() -> None:
    client = FakeVenueClient()
    service = _service(client)
    location = Location(latitude=52.52, longitude=13.4)

    asyncio.run(service.plan(1, "bar", location))

    assert client.calls[0]["location"] == location
    assert client.calls[0]["schema"] is None


def test_plan_attaches_references_by_position() -> None:
    client = FakeVenueClient(references=["https://maps/1", "https://maps/2", "https://maps/3"])
    service = _service(client)

    plan = asyncio.run(service.plan(1, "bar"))

    assert [venue.maps_uri for venue in plan.venues] == [
        "https://maps/1",
        "https://maps/2",
    ]


def test_plan_with_fewer_references_leaves_rest_unset() -> None:
    client = FakeVenueClient(references=["https://maps/1"])
    service = _service(client)

    plan = asyncio.run(service.plan(1, "bar"))

    assert plan.venues[0].maps_uri == "https://maps/1"
    assert plan.venues[1].maps_uri is None


@pytest.mark.parametrize(
    "text",
    ["Sorry, I found nothing.", "] reversed [", "[]", '[{"rating": 5}]'],
)
def test_plan_without_usable_venues_is_no_results(text: str) -> None:
    service = _service(FakeVenueClient(text=text))

    with pytest.raises(NoResultsError):
        asyncio.run(service.plan(1, "bar"))

    assert service.repository.plans == []


def test_plan_skips_malformed_items_but_keeps_slots() -> None:
    text = json.dumps(["junk", {"name": "Kept"}])
    client = FakeVenueClient(text=text, references=["https://maps/junk", "https://maps/kept"])
    service = _service(client)

    plan = asyncio.run(service.plan(1, "bar"))

    assert len(plan.venues) == 1
    assert plan.venues[0].maps_uri == "https://maps/kept"


def test_plan_provider_failure_persists_nothing() -> None:
    client = FakeVenueClient(error=ProviderUnavailableError(details="boom"))
    service = _service(client)

    with pytest.raises(ProviderUnavailableError) as excinfo:
        asyncio.run(service.plan(1, "bar"))

    assert excinfo.value.message == "Failed to plan"
    assert service.repository.plans == []


def test_plan_without_client_is_not_configured() -> None:
    service = PlannerService(
        client=None, repository=InMemoryPlanRepository(), model="gpt-test"
    )

    with pytest.raises(NotConfiguredError):
        asyncio.run(service.plan(1, "bar"))


def test_plan_rejects_blank_prompt() -> None:
    with pytest.raises(BadRequestError):
        asyncio.run(_service().plan(1, "   "))


def test_plan_schema_mode_parses_venues_object() -> None:
    text = json.dumps({"venues": [{"name": "Hall", "rating": 4.0}]})
    client = FakeVenueClient(text=text)
    service = _service(client, mode=ExtractionMode.SCHEMA)

    plan = asyncio.run(service.plan(1, "hall"))

    assert plan.venues[0].name == "Hall"
    assert client.calls[0]["schema"] == VENUES_SCHEMA


def test_plan_schema_mode_malformed_output_is_fatal() -> None:
    service = _service(FakeVenueClient(text="[oops"), mode=ExtractionMode.SCHEMA)

    with pytest.raises(UnexpectedProviderResponseError):
        asyncio.run(service.plan(1, "hall"))

    assert service.repository.plans == []


def test_history_returns_only_own_plans_newest_first() -> None:
    service = _service()
    first = asyncio.run(service.plan(1, "first"))
    asyncio.run(service.plan(2, "other"))
    second = asyncio.run(service.plan(1, "second"))

    history = service.history(1)

    assert [plan.id for plan in history] == [second.id, first.id]


def test_plan_logs_account_and_venue_count(caplog: pytest.LogCaptureFixture) -> None:
    planner_logger = logging.getLogger("macrolens.services.planner")
    planner_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="macrolens.services.planner"):
            asyncio.run(_service().plan(42, "bar"))
    finally:
        planner_logger.removeHandler(caplog.handler)

    assert "Stored plan for account 42 with 2 venues" in caplog.messages
