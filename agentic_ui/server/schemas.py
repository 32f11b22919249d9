"""
API Schemas.

This module defines the Pydantic models used for request validation and
response serialization of the copilot gateway, including the payloads of the
Server-Sent Events the chat stream emits.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from agentic_ui.bridge.capabilities import ParameterSpec
from agentic_ui.providers.adapters.base import ChatMessage

# =====================================================================
# Requests
# =====================================================================


class DeclaredAction(BaseModel):
    """
    An action the caller implements itself.

    The agent sees it like any other action, but a call to it is relayed back
    to the caller instead of being executed on the server.
    """

    name: str = Field(..., min_length=1, description="Unique action name.")
    description: str = Field(default="", description="What the action does, shown to the agent.")
    parameters: List[ParameterSpec] = Field(default_factory=list, description="Ordered parameter specs.")


class ReadableIn(BaseModel):
    """A readable supplied with the request rather than registered on the server."""

    description: str = Field(..., description="What the value represents.")
    value: Any = Field(default=None, description="JSON value.")


class ChatRequest(BaseModel):
    """
    Request body of ``POST /api/copilotkit``.

    Tool results for relayed actions are sent back as ``tool`` messages in the
    next request.
    """

    messages: List[ChatMessage] = Field(default_factory=list, description="Conversation so far, oldest first.")
    actions: List[DeclaredAction] = Field(default_factory=list, description="Caller-implemented actions.")
    readables: List[ReadableIn] = Field(default_factory=list, description="Extra context from the caller.")
    instructions: Optional[str] = Field(default=None, description="Extra system instructions for this request.")


# =====================================================================
# Responses
# =====================================================================


class StatusResponse(BaseModel):
    """Response of ``GET /api/copilotkit``."""

    status: Literal["ok", "unconfigured"] = Field(..., description="Whether any provider is configured.")
    adapters: List[str] = Field(default_factory=list, description="Configured providers in priority order.")
    version: str = Field(..., description="Gateway version.")


class ConfigErrorResponse(BaseModel):
    """Structured configuration error returned with status 500."""

    error: str = Field(..., description="What is missing and how to fix it.")


# =====================================================================
# Stream events
# =====================================================================


class TextDeltaEvent(BaseModel):
    """A fragment of assistant text."""

    type: Literal["text_delta"] = "text_delta"
    content: str


class ActionExecutionStartEvent(BaseModel):
    """A server-side action is about to run."""

    type: Literal["action_execution_start"] = "action_execution_start"
    action_call_id: str
    action_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ActionExecutionResultEvent(BaseModel):
    """A server-side action finished; ``result`` is what the agent sees."""

    type: Literal["action_execution_result"] = "action_execution_result"
    action_call_id: str
    action_name: str
    result: str
    succeeded: bool
    stale: bool = False


class ActionCallEvent(BaseModel):
    """The agent called a caller-implemented action; the caller must run it."""

    type: Literal["action_call"] = "action_call"
    action_call_id: str
    action_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ErrorEvent(BaseModel):
    """The request failed. Never carries provider internals."""

    type: Literal["error"] = "error"
    error: str


class DoneEvent(BaseModel):
    """Last event of every stream."""

    type: Literal["done"] = "done"
    finish_reason: Literal["stop", "action_required", "max_roundtrips", "error"] = "stop"
    provider: Optional[str] = None


GatewayEvent = Union[
    TextDeltaEvent,
    ActionExecutionStartEvent,
    ActionExecutionResultEvent,
    ActionCallEvent,
    ErrorEvent,
    DoneEvent,
]
