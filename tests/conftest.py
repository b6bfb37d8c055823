"""
Notes API - Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (all function-scoped, so every test starts from an empty store):
    ├── store: Empty MemDB built from the notes schema
    ├── note_service: NoteService bound to `store`
    ├── app: FastAPI app serving `store`
    └── test_client: HTTPX AsyncClient talking to `app` in-process
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Settings are read at import time; keep test output quiet.
os.environ.setdefault("LOG_LEVEL", "WARNING")

from notes_api.database import create_store  # noqa: E402
from notes_api.main import create_app  # noqa: E402
from notes_api.services.note_service import NoteService  # noqa: E402


@pytest.fixture
def store():
    """A fresh, empty in-memory store."""
    return create_store()


@pytest.fixture
def note_service(store):
    """NoteService over the test's store with the default UUID4 id factory."""
    return NoteService(store=store)


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient configured to talk to the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
