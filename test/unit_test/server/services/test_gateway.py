"""
Unit tests for the request gateway.

The backend is a scripted adapter that plays back one list of chunks per
turn, so every test controls exactly what the "model" says and calls.
"""

from typing import List

import pytest
from pydantic import SecretStr

from agentic_ui.bridge.capabilities import (
    ActionDescriptor,
    CapabilityKind,
    CapabilityRegistry,
    ParameterSpec,
    ParameterType,
    ReadableEntry,
)
from agentic_ui.providers import (
    PROVIDER_API_KEY_MAPPING,
    AdapterCredentialSet,
    AdapterHandle,
    AIModelProvider,
    ProviderCredential,
    Unconfigured,
)
from agentic_ui.providers.adapters import ChatMessage
from agentic_ui.server.core.config import GatewayConfig
from agentic_ui.server.schemas import ChatRequest, DeclaredAction, ReadableIn
from agentic_ui.server.services.gateway import (
    CONTEXT_HEADER,
    INTERNAL_ERROR_MESSAGE,
    GatewayState,
    RequestGateway,
    stale_notice,
)


def credentials_with(*providers: AIModelProvider) -> AdapterCredentialSet:
    return AdapterCredentialSet(
        credentials=[
            ProviderCredential(
                provider=provider,
                env_var=PROVIDER_API_KEY_MAPPING[provider],
                api_key=SecretStr("key") if provider in providers else None,
                model="test-model",
            )
            for provider in AIModelProvider
        ]
    )


def user(content: str) -> ChatRequest:
    return ChatRequest(messages=[ChatMessage(role="user", content=content)])


async def run(gateway: RequestGateway, request: ChatRequest) -> List:
    handle = gateway.resolve()
    assert isinstance(handle, AdapterHandle)
    return [event async for event in gateway.handle(request, handle)]


def types(events) -> List[str]:
    return [event.type for event in events]


@pytest.fixture
def counter(registry: CapabilityRegistry) -> dict:
    state = {"count": 0}

    def set_count(params):
        state["count"] = params["value"]
        registry.register(CapabilityKind.READABLE, "count", ReadableEntry(description="Counter", value=dict(state)))
        return f"Count set to {params['value']}"

    registry.register(CapabilityKind.READABLE, "count", ReadableEntry(description="Counter", value=dict(state)))
    registry.register_action(
        ActionDescriptor(
            name="setCount",
            description="Set the counter",
            parameters=[ParameterSpec(name="value", type=ParameterType.NUMBER)],
            handler=set_count,
        )
    )
    return state


@pytest.fixture
def gateway_for(registry: CapabilityRegistry):
    def _build(router, config: GatewayConfig = None, *providers: AIModelProvider) -> RequestGateway:
        return RequestGateway(
            registry=registry,
            router=router,
            credentials=credentials_with(*(providers or (AIModelProvider.OPENAI,))),
            config=config,
        )

    return _build


class TestResolve:
    def test_unconfigured(self, registry, scripted):
        router, _ = scripted()
        gateway = RequestGateway(registry=registry, router=router, credentials=credentials_with())

        assert isinstance(gateway.resolve(), Unconfigured)

    def test_selects_first_configured(self, registry, scripted, gateway_for):
        router, adapter = scripted()
        handle = gateway_for(router, None, AIModelProvider.GOOGLE, AIModelProvider.GROQ).resolve()

        assert handle.provider == AIModelProvider.GROQ
        assert handle.adapter is adapter


class TestSystemPrompt:
    """Test instruction and readable context assembly."""

    def test_empty(self, registry, scripted, gateway_for):
        router, _ = scripted()
        assert gateway_for(router).build_system_prompt(user("hi")) is None

    def test_instructions_then_context(self, registry, scripted, gateway_for):
        registry.register(CapabilityKind.READABLE, "r", ReadableEntry(description="Server state", value=1))
        router, _ = scripted()
        gateway = gateway_for(router, GatewayConfig(instructions="You are helpful."))
        request = ChatRequest(
            instructions="Answer briefly.",
            readables=[ReadableIn(description="Client state", value={"page": 2})],
        )

        prompt = gateway.build_system_prompt(request)

        assert prompt.startswith("You are helpful.\n\nAnswer briefly.\n\n" + CONTEXT_HEADER)
        assert prompt.index("Server state:") < prompt.index("Client state:")

    def test_token_budget_truncates_context(self, registry, scripted, gateway_for):
        for index in range(20):
            registry.register(CapabilityKind.READABLE, f"r{index}", ReadableEntry(description=f"entry {index}", value="x" * 100))
        router, _ = scripted()
        prompt = gateway_for(router, GatewayConfig(readable_token_budget=100)).build_system_prompt(user("hi"))

        assert "Context truncated" in prompt
        assert "entry 19" in prompt
        assert "entry 0:" not in prompt


class TestTools:
    def test_declared_action_with_server_name_is_ignored(self, registry, counter, scripted, gateway_for):
        router, _ = scripted()
        request = ChatRequest(
            actions=[
                DeclaredAction(name="setCount", description="client version"),
                DeclaredAction(name="openModal", parameters=[ParameterSpec(name="id")]),
                DeclaredAction(name="openModal", description="duplicate"),
            ]
        )

        tools, relayed = gateway_for(router).build_tools(request)

        assert [tool.name for tool in tools] == ["setCount", "openModal"]
        assert tools[0].description == "Set the counter"
        assert tools[1].parameters["required"] == ["id"]
        assert relayed == {"openModal"}


class TestTextOnly:
    @pytest.mark.asyncio
    async def test_streams_text_then_done(self, registry, counter, scripted, gateway_for):
        router, adapter = scripted([scripted.text("Hel"), scripted.text("lo")])
        gateway = gateway_for(router)

        events = await run(gateway, user("hi"))

        assert types(events) == ["text_delta", "text_delta", "done"]
        assert [e.content for e in events[:2]] == ["Hel", "lo"]
        assert events[-1].finish_reason == "stop"
        assert events[-1].provider == "openai"
        assert gateway.state == GatewayState.DONE

        (call,) = adapter.calls
        assert [tool.name for tool in call["tools"]] == ["setCount"]
        assert "Counter:" in call["system"]


class TestServerActions:
    """Test server-side action execution and the follow-up turn."""

    @pytest.mark.asyncio
    async def test_action_result_is_fed_back(self, registry, counter, scripted, gateway_for):
        router, adapter = scripted(
            [scripted.text("Setting it."), scripted.tool_call("setCount", {"value": 5}, call_id="c1")],
            [scripted.text("Done, the count is 5.")],
        )

        events = await run(gateway_for(router), user("set count to 5"))

        assert types(events) == [
            "text_delta",
            "action_execution_start",
            "action_execution_result",
            "text_delta",
            "done",
        ]
        start, result = events[1], events[2]
        assert start.action_call_id == "c1"
        assert start.arguments == {"value": 5}
        assert result.result == "Count set to 5"
        assert result.succeeded and not result.stale
        assert counter["count"] == 5

        second = adapter.calls[1]
        assistant, tool = second["messages"][-2:]
        assert assistant.role == "assistant"
        assert assistant.content == "Setting it."
        assert assistant.tool_calls[0].id == "c1"
        assert tool.role == "tool"
        assert tool.tool_call_id == "c1"
        assert tool.content == "Count set to 5"
        assert '"count": 5' in second["system"]

    @pytest.mark.asyncio
    async def test_each_turn_sees_fresh_readables(self, registry, counter, scripted, gateway_for):
        router, adapter = scripted(
            [scripted.tool_call("setCount", {"value": 2}, call_id="c1")],
            [scripted.tool_call("setCount", {"value": 7}, call_id="c2")],
            [scripted.text("Now 7.")],
        )

        await run(gateway_for(router), user("count up"))

        systems = [call["system"] for call in adapter.calls]
        assert '"count": 0' in systems[0]
        assert '"count": 2' in systems[1] and '"count": 0' not in systems[1]
        assert '"count": 7' in systems[2] and '"count": 2' not in systems[2]

    @pytest.mark.asyncio
    async def test_failed_action_is_reported_to_agent(self, registry, scripted, gateway_for):
        router, adapter = scripted(
            [scripted.tool_call("doesNotExist", {}, call_id="c9")],
            [scripted.text("Sorry.")],
        )

        events = await run(gateway_for(router), user("do it"))

        result = events[1]
        assert result.type == "action_execution_result"
        assert not result.succeeded
        assert result.result == "Unknown action: doesNotExist"
        assert adapter.calls[1]["messages"][-1].content == "Unknown action: doesNotExist"
        assert events[-1].finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_stale_result_is_replaced_with_notice(self, registry, scripted, gateway_for):
        disposers = []

        def handler(params):
            disposers[0]()
            return "late result"

        disposers.append(registry.register_action(ActionDescriptor(name="vanish", handler=handler)))
        router, adapter = scripted([scripted.tool_call("vanish")], [scripted.text("ok")])

        events = await run(gateway_for(router), user("go"))

        result = events[1]
        assert result.stale
        assert result.result == stale_notice("vanish")
        assert adapter.calls[1]["messages"][-1].content == stale_notice("vanish")

    @pytest.mark.asyncio
    async def test_round_trip_limit(self, registry, counter, scripted, gateway_for):
        turn = [scripted.tool_call("setCount", {"value": 1})]
        router, adapter = scripted(turn, turn, turn)

        events = await run(gateway_for(router, GatewayConfig(max_action_roundtrips=2)), user("loop"))

        assert len(adapter.calls) == 2
        assert "error" not in types(events)
        assert events[-1].finish_reason == "max_roundtrips"


class TestRelayedActions:
    """Test caller-declared actions."""

    @pytest.mark.asyncio
    async def test_declared_action_is_relayed(self, registry, scripted, gateway_for):
        router, adapter = scripted([scripted.tool_call("openModal", {"id": "x"}, call_id="c2")])
        request = ChatRequest(
            messages=[ChatMessage(role="user", content="open it")],
            actions=[DeclaredAction(name="openModal", parameters=[ParameterSpec(name="id")])],
        )

        events = await run(gateway_for(router), request)

        assert types(events) == ["action_call", "done"]
        assert events[0].action_call_id == "c2"
        assert events[0].arguments == {"id": "x"}
        assert events[-1].finish_reason == "action_required"
        assert len(adapter.calls) == 1

    @pytest.mark.asyncio
    async def test_mixed_turn_runs_server_actions_first(self, registry, counter, scripted, gateway_for):
        router, _ = scripted(
            [
                scripted.tool_call("openModal", {"id": "x"}, call_id="client"),
                scripted.tool_call("setCount", {"value": 2}, call_id="server"),
            ]
        )
        request = ChatRequest(
            messages=[ChatMessage(role="user", content="both")],
            actions=[DeclaredAction(name="openModal", parameters=[ParameterSpec(name="id")])],
        )

        events = await run(gateway_for(router), request)

        assert types(events) == ["action_execution_start", "action_execution_result", "action_call", "done"]
        assert counter["count"] == 2
        assert events[-1].finish_reason == "action_required"

    @pytest.mark.asyncio
    async def test_relayed_result_continues_in_next_request(self, registry, scripted, gateway_for):
        router, adapter = scripted([scripted.text("Modal opened.")])
        request = ChatRequest(
            messages=[
                ChatMessage(role="user", content="open it"),
                ChatMessage(
                    role="assistant",
                    tool_calls=[{"id": "c2", "name": "openModal", "arguments": {"id": "x"}}],
                ),
                ChatMessage(role="tool", content="opened", tool_call_id="c2", name="openModal"),
            ],
            actions=[DeclaredAction(name="openModal", parameters=[ParameterSpec(name="id")])],
        )

        events = await run(gateway_for(router), request)

        assert types(events) == ["text_delta", "done"]
        assert adapter.calls[0]["messages"][-1].content == "opened"


class TestFailures:
    """Test timeout and backend errors."""

    @pytest.mark.asyncio
    async def test_backend_timeout(self, registry, scripted, gateway_for):
        router, _ = scripted([scripted.text("partial")], hang_on_turn=0)
        gateway = gateway_for(router, GatewayConfig(request_timeout=0.05))

        events = await run(gateway, user("hi"))

        assert types(events) == ["text_delta", "error", "done"]
        assert events[1].error == "Backend request timed out after 0.05s"
        assert events[-1].finish_reason == "error"
        assert gateway.state == GatewayState.DONE

    @pytest.mark.asyncio
    async def test_backend_exception_is_not_leaked(self, registry, scripted, gateway_for):
        router, _ = scripted()

        events = await run(gateway_for(router), user("hi"))

        assert types(events) == ["error", "done"]
        assert events[0].error == INTERNAL_ERROR_MESSAGE
        assert "scripted" not in events[0].error
        assert events[-1].finish_reason == "error"
