from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterable, List, Optional, Sequence

import httpx
import pytest

from agentic_ui.bridge.capabilities import CapabilityRegistry
from agentic_ui.providers import PROVIDER_API_KEY_MAPPING, AIModelProvider, ProviderAdapterRouter
from agentic_ui.providers.adapters import (
    AdapterChunk,
    ChatMessage,
    ServiceAdapter,
    TextDelta,
    ToolCall,
    ToolCallRequest,
    ToolSchema,
)

PROVIDER_ENV_VARS = [
    *PROVIDER_API_KEY_MAPPING.values(),
    "OPENAI_MODEL",
    "ANTHROPIC_MODEL",
    "GROQ_MODEL",
    "GOOGLE_MODEL",
    "GATEWAY_REQUEST_TIMEOUT",
    "GATEWAY_MAX_ACTION_ROUNDTRIPS",
    "READABLE_TOKEN_BUDGET",
    "COPILOT_INSTRUCTIONS",
]


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest.fixture(autouse=True)
def _isolated_provider_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run every test without provider keys and without the developer's ``.env``."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class ScriptedAdapter(ServiceAdapter):
    """Backend double that plays back one scripted list of chunks per turn.

    Every call records a copy of the messages, tools and system prompt it was
    given. ``hang_on_turn`` makes that turn block forever after its chunks.
    """

    provider = "scripted"

    def __init__(self, turns: Sequence[Sequence[AdapterChunk]], hang_on_turn: Optional[int] = None) -> None:
        super().__init__("scripted-model")
        self.turns = [list(turn) for turn in turns]
        self.hang_on_turn = hang_on_turn
        self.calls: List[dict] = []

    async def stream(
        self,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolSchema] = (),
        system: Optional[str] = None,
    ) -> AsyncIterator[AdapterChunk]:
        index = len(self.calls)
        self.calls.append(
            {
                "messages": [m.model_copy(deep=True) for m in messages],
                "tools": list(tools),
                "system": system,
            }
        )
        if index >= len(self.turns):
            raise RuntimeError("scripted adapter ran out of turns")
        for chunk in self.turns[index]:
            yield chunk
        if self.hang_on_turn == index:
            await asyncio.Event().wait()


def text(content: str) -> TextDelta:
    return TextDelta(text=content)


def tool_call(name: str, arguments: Optional[dict] = None, call_id: str = "call-1") -> ToolCallRequest:
    return ToolCallRequest(call=ToolCall(id=call_id, name=name, arguments=arguments or {}))


@pytest.fixture
def registry() -> CapabilityRegistry:
    return CapabilityRegistry()


@pytest.fixture
def scripted():
    """Build a ``ScriptedAdapter`` and a router that hands it out for every provider.

    Returns ``(router, adapter)``. Also exposes ``scripted.text`` and
    ``scripted.tool_call`` chunk builders.
    """

    class _Builder:
        text = staticmethod(text)
        tool_call = staticmethod(tool_call)

        def __call__(self, *turns: Sequence[AdapterChunk], hang_on_turn: Optional[int] = None):
            adapter = ScriptedAdapter(turns, hang_on_turn=hang_on_turn)
            router = ProviderAdapterRouter({provider: (lambda credential: adapter) for provider in AIModelProvider})
            return router, adapter

    return _Builder()
