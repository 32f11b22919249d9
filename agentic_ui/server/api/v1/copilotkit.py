"""
Copilot Gateway Endpoints.

This module exposes the chat gateway the agent UI talks to:

- ``POST /api/copilotkit`` streams a chat turn as Server-Sent Events. Each
  event payload is one of the gateway event schemas (``text_delta``,
  ``action_execution_start``, ``action_execution_result``, ``action_call``,
  ``error``, ``done``).
- ``GET /api/copilotkit`` reports which providers are configured without
  sending anything to a backend.

Includes monitoring via Pydantic AI Logfire for request and error tracking.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from agentic_ui.core.logging_config import get_logger
from agentic_ui.core.monitoring import log_error
from agentic_ui.providers import Unconfigured
from agentic_ui.server.core import constant
from agentic_ui.server.schemas import ChatRequest, ConfigErrorResponse, StatusResponse
from agentic_ui.server.services.deps import CredentialsDep, GatewayDep
from agentic_ui.server.services.gateway import INTERNAL_ERROR_MESSAGE

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    summary="Chat",
    description="Run one chat turn against the configured LLM backend and stream it back as Server-Sent Events.",
    response_description="An event stream, or a configuration error.",
    responses={500: {"model": ConfigErrorResponse, "description": "No provider configured or backend setup failed."}},
)
async def chat(chat_request: ChatRequest, request: Request, gateway: GatewayDep):
    """
    Stream a chat turn.

    The backend is chosen per request from the configured API keys, in the
    order OpenAI, Anthropic, Groq, Google.

    **Response:**
    - ``500`` with ``{"error": ...}`` when no API key is configured
    - otherwise an SSE stream whose last event is ``done``
    """
    try:
        selection = gateway.resolve()
    except Exception as e:
        logger.error(f"Failed to set up backend adapter: {e}", exc_info=True)
        log_error("adapter_setup_failed", str(e))
        return JSONResponse(status_code=500, content=ConfigErrorResponse(error=INTERNAL_ERROR_MESSAGE).model_dump())

    if isinstance(selection, Unconfigured):
        logger.error(f"Chat request rejected, missing credentials: {', '.join(selection.missing_env_vars)}")
        return JSONResponse(status_code=500, content=ConfigErrorResponse(error=selection.message).model_dump())

    async def event_generator():
        async for event in gateway.handle(chat_request, selection):
            if await request.is_disconnected():
                logger.info("Client disconnected from chat stream")
                break
            yield {"event": event.type, "data": event.model_dump_json()}

    return EventSourceResponse(event_generator())


@router.get(
    "",
    response_model=StatusResponse,
    summary="Gateway Status",
    description="Report whether any LLM provider is configured and which ones are available.",
    response_description="Status object.",
)
async def status(credentials: CredentialsDep) -> StatusResponse:
    """
    Gateway status.

    Reads credentials fresh, so a key added to ``.env`` shows up without a restart.
    """
    adapters = [str(provider) for provider in credentials.configured()]
    return StatusResponse(
        status="ok" if adapters else "unconfigured",
        adapters=adapters,
        version=constant.API_VERSION,
    )
