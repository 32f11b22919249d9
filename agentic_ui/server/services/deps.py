"""
Gateway Dependencies.

FastAPI dependencies that assemble a ``RequestGateway`` for each chat request.
Settings and credentials are read fresh per request; the registry and router
live on ``app.state`` and are created by the application lifespan.
"""

from typing import Annotated

from fastapi import Depends, Request

from agentic_ui.bridge.capabilities import CapabilityRegistry
from agentic_ui.providers import AdapterCredentialSet, ProviderAdapterRouter
from agentic_ui.server.core.config import Settings
from agentic_ui.server.services.gateway import RequestGateway


def get_settings() -> Settings:
    """Read settings from the environment and ``.env`` for this request."""
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_registry(request: Request) -> CapabilityRegistry:
    return request.app.state.registry


def get_router(request: Request) -> ProviderAdapterRouter:
    return request.app.state.router


def get_credentials(settings: SettingsDep) -> AdapterCredentialSet:
    return AdapterCredentialSet.from_settings(settings)


RegistryDep = Annotated[CapabilityRegistry, Depends(get_registry)]
RouterDep = Annotated[ProviderAdapterRouter, Depends(get_router)]
CredentialsDep = Annotated[AdapterCredentialSet, Depends(get_credentials)]


def get_gateway(
    registry: RegistryDep,
    router: RouterDep,
    credentials: CredentialsDep,
    settings: SettingsDep,
) -> RequestGateway:
    return RequestGateway(registry=registry, router=router, credentials=credentials, config=settings.gateway)


GatewayDep = Annotated[RequestGateway, Depends(get_gateway)]
