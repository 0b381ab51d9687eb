"""Fixtures for HTTP facade tests.

The app is built without running its lifespan: services are attached over
the in-memory store and a fake object storage instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from recibook.core.config import Settings
from recibook.core.events import attach_services
from recibook.factory import create_app
from recibook.services.storage import ImageUploadService
from tests.fixtures.fake_storage import FakeObjectStorage
from tests.fixtures.memory_store import InMemoryDocumentStore


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


async def _public_dns(_host: str) -> list[str]:
    return ["93.184.216.34"]


@pytest.fixture
def api_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def app(api_store: InMemoryDocumentStore, object_storage: FakeObjectStorage) -> FastAPI:
    settings = Settings(APP_ENV="test")
    application = create_app(settings)
    attach_services(application, api_store, settings)
    application.state.image_service = ImageUploadService(
        object_storage, resolve=_public_dns
    )
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://test/api/v1"
    ) as ac:
        yield ac
