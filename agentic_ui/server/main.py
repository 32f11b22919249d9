"""
Main Application Entry Point.

This module builds the FastAPI application: it owns the capability registry
and the provider router on ``app.state``, mounts the bridge components for
the lifetime of the app, configures middleware (CORS, request timing) and
includes the API routers.
"""

from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentic_ui.bridge.capabilities import CapabilityRegistry
from agentic_ui.bridge.components import (
    BridgeComponent,
    CatalogDiscovery,
    CopilotTable,
    SmartDataGrid,
    SmartRegistry,
)
from agentic_ui.core.logging_config import get_logger, setup_logging
from agentic_ui.core.monitoring import initialize_logfire
from agentic_ui.providers import ProviderAdapterRouter

from .api.v1 import copilotkit, health
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


def default_components() -> List[BridgeComponent]:
    """The components every app instance mounts at startup."""
    return [CatalogDiscovery(), SmartRegistry(), SmartDataGrid(), CopilotTable()]


def mount_components(registry: CapabilityRegistry, components: List[BridgeComponent]) -> List[BridgeComponent]:
    """Mount components in order; on failure unmount the ones already mounted and re-raise."""
    mounted: List[BridgeComponent] = []
    try:
        for component in components:
            mounted.append(component.mount(registry))
    except Exception:
        for component in reversed(mounted):
            component.unmount()
        raise
    return mounted


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Mounts the bridge components on startup and unmounts them on shutdown,
    which removes every capability they registered.
    """
    logger.info("Starting up Agentic UI Bridge...")
    registry: CapabilityRegistry = app.state.registry
    components = mount_components(registry, default_components())
    logger.info(f"Mounted {len(components)} components ({len(registry)} capabilities registered)")

    yield

    logger.info("Shutting down Agentic UI Bridge...")
    for component in reversed(components):
        component.unmount()


def create_app(
    registry: Optional[CapabilityRegistry] = None,
    router: Optional[ProviderAdapterRouter] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        registry: Capability registry for this app. A fresh one by default.
        router: Provider router. Defaults to the Pydantic AI backends.
    """
    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        Agentic UI Bridge API

        Chat gateway between agentic UI components and LLM backends. Components publish
        readable state and register actions; the gateway streams the conversation and
        executes the actions the agent calls.
        """,
        version=constant.API_VERSION,
        lifespan=lifespan,
    )
    app.state.registry = registry if registry is not None else CapabilityRegistry()
    app.state.router = router if router is not None else ProviderAdapterRouter()

    cors = settings.cors
    app.add_middleware(LogfireMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    setup_exception_handlers(app)
    initialize_logfire(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(copilotkit.router, prefix=constant.COPILOTKIT_PATH, tags=["copilotkit"])
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn using the configured host and port."""
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_config=None)


if __name__ == "__main__":
    run()
