from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from agentic_ui.bridge.capabilities import CapabilityRegistry
from agentic_ui.providers import ProviderAdapterRouter
from agentic_ui.server.main import create_app


@pytest.fixture
def make_app(registry: CapabilityRegistry) -> Callable[..., FastAPI]:
    """Build an app on the test registry. The ASGI transport does not run the lifespan."""

    def _make(router: ProviderAdapterRouter = None) -> FastAPI:
        return create_app(registry=registry, router=router)

    return _make


@pytest_asyncio.fixture(name="client")
async def client_fixture(make_app) -> AsyncGenerator[AsyncClient, None]:
    """An async HTTP client on an app with no components mounted and the default router."""
    app = make_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
