"""API test fixtures — app with persistence and notifier overridden."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import weatherops.dependencies as dep_mod
from weatherops.main import app
from weatherops.utils.outcome import Outcome


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.notify_critical = AsyncMock(return_value=Outcome.success())
    return notifier


@pytest.fixture
def backend(store):
    """Persistence client used by the app; tests may replace it."""
    return {"store": store}


@pytest_asyncio.fixture
async def client(backend, notifier):
    """Async HTTP client for testing."""
    app.dependency_overrides[dep_mod.get_persistence_client] = lambda: backend["store"]
    app.dependency_overrides[dep_mod.get_operator_notifier] = lambda: notifier

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
