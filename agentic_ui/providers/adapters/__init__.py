"""LLM backend adapters.

``base`` holds the provider-neutral message and chunk types and the
``ServiceAdapter`` interface; ``pydantic_ai_adapter`` implements it on top of
Pydantic AI for every supported provider.
"""

from .base import (
    AdapterChunk,
    ChatMessage,
    ServiceAdapter,
    TextDelta,
    ToolCall,
    ToolCallRequest,
    ToolSchema,
)

__all__ = [
    "AdapterChunk",
    "ChatMessage",
    "ServiceAdapter",
    "TextDelta",
    "ToolCall",
    "ToolCallRequest",
    "ToolSchema",
]
