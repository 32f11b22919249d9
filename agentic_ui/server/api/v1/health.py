"""
Health Check Endpoints.

Liveness and version endpoints used for monitoring and deployment
verification. The health payload also reports how many actions and readables
are currently registered, which makes a component that failed to mount
visible at a glance.
"""

from fastapi import APIRouter

from agentic_ui.bridge.capabilities import CapabilityKind
from agentic_ui.server.core import constant
from agentic_ui.server.services.deps import RegistryDep

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server and its capability registry.",
    response_description="Status object.",
)
async def health_check(registry: RegistryDep):
    """Report liveness and registered capability counts."""
    return {
        "status": "ok",
        "actions": len(registry.list(CapabilityKind.ACTION)),
        "readables": len(registry.list(CapabilityKind.READABLE)),
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
