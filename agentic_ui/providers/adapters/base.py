"""Service adapter abstraction.

A service adapter wraps one LLM backend behind a single streaming call. The
gateway hands it the conversation so far, the tool schemas of every action
the agent may call and the system context, and consumes a stream of chunks:
text deltas as they arrive, then any tool calls the backend decided to make.
One ``stream`` call is one backend turn; the gateway starts a new turn after
feeding tool results back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field

ChatRole = Literal["system", "user", "assistant", "tool"]


class ToolCall(BaseModel):
    """A tool call made by the assistant."""

    id: str = Field(..., description="Backend-assigned call id, echoed back on the tool result")
    name: str = Field(..., description="Name of the action to invoke")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Raw arguments as produced by the model")


class ChatMessage(BaseModel):
    """One conversation message in the provider-neutral shape."""

    role: ChatRole = Field(..., description="Author of the message")
    content: str = Field(default="", description="Message text")
    tool_calls: List[ToolCall] = Field(default_factory=list, description="Tool calls made by an assistant message")
    tool_call_id: Optional[str] = Field(default=None, description="Call id a tool message answers")
    name: Optional[str] = Field(default=None, description="Action name a tool message answers")


class ToolSchema(BaseModel):
    """JSON-schema tool definition sent to a backend."""

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


class TextDelta(BaseModel):
    """A fragment of assistant text."""

    kind: Literal["text"] = "text"
    text: str


class ToolCallRequest(BaseModel):
    """The backend asks for an action to be invoked."""

    kind: Literal["tool_call"] = "tool_call"
    call: ToolCall


AdapterChunk = Union[TextDelta, ToolCallRequest]


class ServiceAdapter(ABC):
    """
    One LLM backend.

    Implementations must not retry; a failing backend raises out of ``stream``
    and the gateway reports it.
    """

    provider: str = "unknown"

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    @abstractmethod
    def stream(
        self,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolSchema] = (),
        system: Optional[str] = None,
    ) -> AsyncIterator[AdapterChunk]:
        """
        Run one backend turn.

        Args:
            messages: Conversation so far, oldest first.
            tools: Actions the model may call.
            system: System context (instructions plus readable snapshot).

        Yields:
            ``TextDelta`` chunks while text streams in, then one
            ``ToolCallRequest`` per tool call of the turn.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider}, model={self.model_name})"
