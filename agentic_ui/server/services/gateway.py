"""
Request Gateway.

This module drives one chat request end to end: before every backend turn it
rebuilds the system context from registered readables, offers registered and
caller-declared actions to the selected backend as tools, streams text back
as it arrives, executes server-side actions through the dispatch executor and
feeds their results back into the conversation for another backend turn.

Each request walks an explicit state machine::

    STREAMING -> AWAITING_TOOL_RESULT -> STREAMING -> ... -> DONE

The whole request shares one deadline (``GATEWAY_REQUEST_TIMEOUT``); a
backend that stops producing chunks surfaces as an ``error`` event followed
by ``done``, never as a hung stream.
"""

import asyncio
from enum import Enum
from typing import AsyncIterator, List, Optional, Set, Tuple, Union

from agentic_ui.bridge.capabilities import CapabilityKind, CapabilityRegistry, ReadableEntry, build_tool_schema
from agentic_ui.bridge.dispatch import DispatchExecutor, InvocationResult
from agentic_ui.bridge.readable import ReadableAggregator
from agentic_ui.core.logging_config import get_logger
from agentic_ui.core.monitoring import log_chat_request, log_error
from agentic_ui.providers import AdapterCredentialSet, AdapterHandle, ProviderAdapterRouter, Unconfigured
from agentic_ui.providers.adapters import AdapterChunk, ChatMessage, TextDelta, ToolCall, ToolSchema
from agentic_ui.server.core.config import GatewayConfig
from agentic_ui.server.schemas import (
    ActionCallEvent,
    ActionExecutionResultEvent,
    ActionExecutionStartEvent,
    ChatRequest,
    DoneEvent,
    ErrorEvent,
    GatewayEvent,
    TextDeltaEvent,
)

logger = get_logger(__name__)

CONTEXT_HEADER = "The current state of the application, as published by the mounted components:"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class GatewayState(str, Enum):
    """Phases of a single chat request."""

    STREAMING = "streaming"
    AWAITING_TOOL_RESULT = "awaiting_tool_result"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


class BackendTimeout(Exception):
    """The backend did not finish within the request deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Backend request timed out after {timeout:g}s")
        self.timeout = timeout


def stale_notice(action_name: str) -> str:
    return f"Action {action_name} finished after its component was removed; the result was discarded."


class RequestGateway:
    """
    Per-request chat gateway.

    Args:
        registry: Registry whose actions and readables the agent sees.
        router: Backend selector.
        credentials: Credentials read for this request.
        config: Gateway timeouts, limits and instructions.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        router: ProviderAdapterRouter,
        credentials: AdapterCredentialSet,
        config: Optional[GatewayConfig] = None,
    ) -> None:
        self.registry = registry
        self.router = router
        self.credentials = credentials
        self.config = config or GatewayConfig()
        self.executor = DispatchExecutor(registry)
        self.aggregator = ReadableAggregator(registry, token_budget=self.config.readable_token_budget)
        self.state = GatewayState.STREAMING

    def resolve(self) -> Union[AdapterHandle, Unconfigured]:
        """Select the backend for this request."""
        return self.router.select(self.credentials)

    # -----------------------------------------------------------------
    # Request assembly
    # -----------------------------------------------------------------

    def build_system_prompt(self, request: ChatRequest) -> Optional[str]:
        """Instructions followed by the readable context document."""
        sections: List[str] = []
        for instructions in (self.config.instructions, request.instructions):
            if instructions:
                sections.append(instructions.strip())

        extra = [ReadableEntry(description=r.description, value=r.value) for r in request.readables]
        context = self.aggregator.render(extra=extra)
        if context:
            sections.append(f"{CONTEXT_HEADER}\n\n{context}")
        return "\n\n".join(sections) or None

    def build_tools(self, request: ChatRequest) -> Tuple[List[ToolSchema], Set[str]]:
        """
        Collect tool schemas for server-side and caller-declared actions.

        Returns:
            The tool list and the names of actions to relay to the caller.
        """
        actions = self.registry.list(CapabilityKind.ACTION)
        tools = [ToolSchema(**descriptor.to_tool_schema()) for descriptor in actions.values()]
        relayed: Set[str] = set()
        for declared in request.actions:
            if declared.name in actions or declared.name in relayed:
                logger.debug(f"Ignoring declared action {declared.name}: name already offered")
                continue
            tools.append(ToolSchema(**build_tool_schema(declared.name, declared.description, declared.parameters)))
            relayed.add(declared.name)
        return tools, relayed

    # -----------------------------------------------------------------
    # Streaming
    # -----------------------------------------------------------------

    async def handle(self, request: ChatRequest, handle: AdapterHandle) -> AsyncIterator[GatewayEvent]:
        """
        Run the conversation turn loop for one request.

        Args:
            request: The chat request.
            handle: Backend selected by ``resolve``.

        Yields:
            Gateway events; the last one is always ``DoneEvent``.
        """
        conversation: List[ChatMessage] = list(request.messages)
        tools, relayed = self.build_tools(request)
        timeout = self.config.request_timeout
        deadline = asyncio.get_running_loop().time() + timeout
        provider = str(handle.provider)

        log_chat_request(provider=provider, message_count=len(conversation), action_count=len(tools))
        logger.info(f"Chat request via {provider}: {len(conversation)} messages, {len(tools)} actions")

        roundtrips = 0
        try:
            while True:
                self.state = GatewayState.STREAMING
                system = self.build_system_prompt(request)
                text: List[str] = []
                calls: List[ToolCall] = []
                async for chunk in self._bounded(handle.adapter.stream(conversation, tools, system), deadline, timeout):
                    if isinstance(chunk, TextDelta):
                        text.append(chunk.text)
                        yield TextDeltaEvent(content=chunk.text)
                    else:
                        calls.append(chunk.call)

                if not calls:
                    break

                self.state = GatewayState.AWAITING_TOOL_RESULT
                conversation.append(ChatMessage(role="assistant", content="".join(text), tool_calls=calls))

                for call in calls:
                    if call.name in relayed:
                        continue
                    yield ActionExecutionStartEvent(
                        action_call_id=call.id, action_name=call.name, arguments=call.arguments
                    )
                    result = await self.executor.invoke(call.name, call.arguments)
                    result_text = self._agent_text(result)
                    yield ActionExecutionResultEvent(
                        action_call_id=call.id,
                        action_name=call.name,
                        result=result_text,
                        succeeded=result.succeeded,
                        stale=result.stale,
                    )
                    conversation.append(
                        ChatMessage(role="tool", content=result_text, tool_call_id=call.id, name=call.name)
                    )

                client_calls = [call for call in calls if call.name in relayed]
                if client_calls:
                    for call in client_calls:
                        yield ActionCallEvent(action_call_id=call.id, action_name=call.name, arguments=call.arguments)
                    self.state = GatewayState.DONE
                    yield DoneEvent(finish_reason="action_required", provider=provider)
                    return

                roundtrips += 1
                if roundtrips >= self.config.max_action_roundtrips:
                    logger.warning(f"Stopping after {roundtrips} action round trips")
                    self.state = GatewayState.DONE
                    yield DoneEvent(finish_reason="max_roundtrips", provider=provider)
                    return

        except BackendTimeout as exc:
            logger.warning(f"{provider} backend timed out after {exc.timeout:g}s")
            log_error("backend_timeout", str(exc), {"provider": provider})
            self.state = GatewayState.DONE
            yield ErrorEvent(error=str(exc))
            yield DoneEvent(finish_reason="error", provider=provider)
            return
        except Exception as exc:
            logger.error(f"Chat request via {provider} failed: {exc}", exc_info=True)
            log_error(type(exc).__name__, str(exc), {"provider": provider})
            self.state = GatewayState.DONE
            yield ErrorEvent(error=INTERNAL_ERROR_MESSAGE)
            yield DoneEvent(finish_reason="error", provider=provider)
            return

        self.state = GatewayState.DONE
        yield DoneEvent(finish_reason="stop", provider=provider)

    @staticmethod
    def _agent_text(result: InvocationResult) -> str:
        if result.stale:
            return stale_notice(result.action_name)
        return result.result_text

    @staticmethod
    async def _bounded(
        stream: AsyncIterator[AdapterChunk], deadline: float, timeout: float
    ) -> AsyncIterator[AdapterChunk]:
        """Yield from ``stream`` until it ends, failing once ``deadline`` passes."""
        loop = asyncio.get_running_loop()
        iterator = stream.__aiter__()
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise BackendTimeout(timeout)
                try:
                    chunk = await asyncio.wait_for(iterator.__anext__(), timeout=remaining)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError:
                    raise BackendTimeout(timeout) from None
                yield chunk
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()
