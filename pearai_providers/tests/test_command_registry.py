from __future__ import annotations

import asyncio

import httpx
import pytest

from pearai_providers.base.errors import TransportError
from pearai_providers.commands import (
    LIST_MODELS,
    QUICK_CHAT,
    CommandNotFound,
    CommandRegistry,
    UISink,
    register_default_commands,
)

from .helpers import ndjson


class _Sink:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    def post_message(self, message) -> None:
        self.messages.append(dict(message))


def test_sink_protocol_is_structural():
    assert isinstance(_Sink(), UISink)  # nosec B101


def test_dispatch_sync_and_async_handlers():
    registry = CommandRegistry(_Sink())

    async def echo_async(sink, value):
        sink.post_message({"type": "echo", "value": value})
        return value * 2

    registry.register("sync", lambda sink, a, b=0: a + b)
    registry.register("async", echo_async)

    assert asyncio.run(registry.dispatch("sync", 1, b=2)) == 3  # nosec B101
    assert asyncio.run(registry.dispatch("async", 21)) == 42  # nosec B101
    assert registry.sink.messages == [{"type": "echo", "value": 21}]  # nosec B101
    assert registry.commands() == ["async", "sync"]  # nosec B101


def test_unknown_command_and_duplicate_registration():
    registry = CommandRegistry(_Sink())
    with pytest.raises(CommandNotFound):
        asyncio.run(registry.dispatch("missing"))
    registry.register("x", lambda sink: 1)
    with pytest.raises(ValueError):
        registry.register("x", lambda sink: 2)
    registry.register("x", lambda sink: 3, replace=True)
    assert asyncio.run(registry.dispatch("x")) == 3  # nosec B101


def test_default_commands_list_models_and_quick_chat(make_client):
    body = ndjson('{"content": "Hi"}', '{"content": " there"}')
    client = make_client(lambda req: httpx.Response(200, content=body))
    sink = _Sink()
    registry = register_default_commands(CommandRegistry(sink), client)

    async def run():
        async with client:
            models = await registry.dispatch(LIST_MODELS)
            answer = await registry.dispatch(QUICK_CHAT, "hello", system="be nice")
            return models, answer

    models, answer = asyncio.run(run())
    assert "gpt-4o" in models  # nosec B101
    assert answer == "Hi there"  # nosec B101
    assert sink.messages[0] == {"type": "models", "models": models}  # nosec B101
    assert sink.messages[1:] == [  # nosec B101
        {"type": "chatDelta", "content": "Hi"},
        {"type": "chatDelta", "content": " there"},
        {"type": "chatDone", "content": "Hi there"},
    ]


def test_quick_chat_posts_error_and_reraises(make_client):
    client = make_client(lambda req: httpx.Response(500, text="boom"))
    sink = _Sink()
    registry = register_default_commands(CommandRegistry(sink), client)

    async def run():
        async with client:
            await registry.dispatch(QUICK_CHAT, "hello")

    with pytest.raises(TransportError):
        asyncio.run(run())
    assert sink.messages[-1]["type"] == "chatError"  # nosec B101
    assert sink.messages[-1]["code"] == "server_error"  # nosec B101
