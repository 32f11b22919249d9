"""Pydantic AI service adapter.

This module implements the ServiceAdapter interface on top of Pydantic AI's
direct model request API, and the per-provider factories that build a
Pydantic AI model from a selected credential.
"""

from __future__ import annotations

from typing import AsyncIterator, Callable, Dict, List, Optional, Sequence, Union

from pydantic_ai.direct import model_request_stream
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    PartDeltaEvent,
    PartStartEvent,
    SystemPromptPart,
    TextPart,
    TextPartDelta,
    ToolCallPart,
    ToolReturnPart,
    UserPromptPart,
)
from pydantic_ai.models import Model, ModelRequestParameters
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.models.openai import OpenAIResponsesModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.groq import GroqProvider
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.tools import ToolDefinition

from agentic_ui.core.logging_config import get_logger
from agentic_ui.providers.credentials import AIModelProvider, ProviderCredential
from agentic_ui.server.core.config import GoogleConfig

from .base import AdapterChunk, ChatMessage, ServiceAdapter, TextDelta, ToolCall, ToolCallRequest, ToolSchema

logger = get_logger(__name__)

RequestPart = Union[SystemPromptPart, UserPromptPart, ToolReturnPart]


def to_model_messages(messages: Sequence[ChatMessage], system: Optional[str] = None) -> List[ModelMessage]:
    """
    Convert provider-neutral messages into Pydantic AI message history.

    Consecutive system, user and tool messages are merged into one request,
    assistant messages become responses.
    """
    history: List[ModelMessage] = []
    pending: List[RequestPart] = []
    if system:
        pending.append(SystemPromptPart(content=system))

    for message in messages:
        if message.role == "assistant":
            if pending:
                history.append(ModelRequest(parts=pending))
                pending = []
            parts: List[Union[TextPart, ToolCallPart]] = []
            if message.content:
                parts.append(TextPart(content=message.content))
            for call in message.tool_calls:
                parts.append(ToolCallPart(tool_name=call.name, args=call.arguments, tool_call_id=call.id))
            if parts:
                history.append(ModelResponse(parts=parts))
        elif message.role == "system":
            pending.append(SystemPromptPart(content=message.content))
        elif message.role == "tool":
            pending.append(
                ToolReturnPart(
                    tool_name=message.name or "",
                    content=message.content,
                    tool_call_id=message.tool_call_id or "",
                )
            )
        else:
            pending.append(UserPromptPart(content=message.content))

    if pending:
        history.append(ModelRequest(parts=pending))
    return history


def to_tool_definitions(tools: Sequence[ToolSchema]) -> List[ToolDefinition]:
    return [
        ToolDefinition(name=tool.name, description=tool.description, parameters_json_schema=tool.parameters)
        for tool in tools
    ]


class PydanticAIAdapter(ServiceAdapter):
    """ServiceAdapter backed by a Pydantic AI model."""

    def __init__(self, provider: AIModelProvider, model: Model, model_name: str) -> None:
        super().__init__(model_name)
        self.provider = str(provider)
        self.model = model

    async def stream(
        self,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolSchema] = (),
        system: Optional[str] = None,
    ) -> AsyncIterator[AdapterChunk]:
        history = to_model_messages(messages, system)
        parameters = ModelRequestParameters(function_tools=to_tool_definitions(tools))
        logger.debug(f"Streaming {self.provider}:{self.model_name} with {len(history)} messages, {len(tools)} tools")

        async with model_request_stream(self.model, history, model_request_parameters=parameters) as response:
            async for event in response:
                if isinstance(event, PartStartEvent) and isinstance(event.part, TextPart):
                    if event.part.content:
                        yield TextDelta(text=event.part.content)
                elif isinstance(event, PartDeltaEvent) and isinstance(event.delta, TextPartDelta):
                    if event.delta.content_delta:
                        yield TextDelta(text=event.delta.content_delta)
            final = response.get()

        for part in final.parts:
            if isinstance(part, ToolCallPart):
                yield ToolCallRequest(
                    call=ToolCall(id=part.tool_call_id, name=part.tool_name, arguments=part.args_as_dict())
                )


def create_openai_adapter(credential: ProviderCredential) -> ServiceAdapter:
    """Create an OpenAI adapter using Pydantic AI."""
    logger.debug(f"Creating OpenAI model: {credential.model} with Pydantic AI")
    model = OpenAIResponsesModel(credential.model, provider=OpenAIProvider(api_key=credential.secret()))
    return PydanticAIAdapter(AIModelProvider.OPENAI, model, credential.model)


def create_anthropic_adapter(credential: ProviderCredential) -> ServiceAdapter:
    """Create an Anthropic adapter using Pydantic AI."""
    logger.debug(f"Creating Anthropic model: {credential.model} with Pydantic AI")
    model = AnthropicModel(credential.model, provider=AnthropicProvider(api_key=credential.secret()))
    return PydanticAIAdapter(AIModelProvider.ANTHROPIC, model, credential.model)


def create_groq_adapter(credential: ProviderCredential) -> ServiceAdapter:
    """Create a Groq adapter using Pydantic AI."""
    logger.debug(f"Creating Groq model: {credential.model} with Pydantic AI")
    model = GroqModel(credential.model, provider=GroqProvider(api_key=credential.secret()))
    return PydanticAIAdapter(AIModelProvider.GROQ, model, credential.model)


def create_google_adapter(credential: ProviderCredential) -> ServiceAdapter:
    """Create a Google adapter from a structured ``GoogleConfig``."""
    config = GoogleConfig(api_key=credential.secret(), model=credential.model)
    logger.debug(f"Creating Google model: {config.model} with Pydantic AI")
    model = GoogleModel(config.model, provider=GoogleProvider(api_key=config.api_key))
    return PydanticAIAdapter(AIModelProvider.GOOGLE, model, config.model)


DEFAULT_ADAPTER_FACTORIES: Dict[AIModelProvider, Callable[[ProviderCredential], ServiceAdapter]] = {
    AIModelProvider.OPENAI: create_openai_adapter,
    AIModelProvider.ANTHROPIC: create_anthropic_adapter,
    AIModelProvider.GROQ: create_groq_adapter,
    AIModelProvider.GOOGLE: create_google_adapter,
}
