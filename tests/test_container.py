"""Tests for container wiring."""

import asyncio
from pathlib import Path

from macrolens.adapters.openai_food_client import OpenAIFoodClient
from macrolens.adapters.sqlite_account_repository import SqliteAccountRepository
from macrolens.config import Settings
from macrolens.containers import build_container
from macrolens.services.normalizer import ExtractionMode


def test_build_container_creates_services(settings: Settings, tmp_path: Path) -> None:
    db_path = tmp_path / "app.db"
    container = build_container(
        settings.model_copy(update={"database_path": str(db_path)})
    )

    assert db_path.exists()
    assert isinstance(container.account_service.repository, SqliteAccountRepository)
    assert isinstance(container.food_service.client, OpenAIFoodClient)
    assert container.food_service.mode is ExtractionMode.SCHEMA
    assert container.planner_service.mode is ExtractionMode.FREE_TEXT
    asyncio.run(container.close_resources())


def test_build_container_without_api_key_has_no_clients(
    settings: Settings, tmp_path: Path
) -> None:
    container = build_container(
        settings.model_copy(
            update={"openai_api_key": None, "database_path": str(tmp_path / "a.db")}
        )
    )

    assert container.food_service.client is None
    assert container.planner_service.client is None
    asyncio.run(container.close_resources())
