"""End-to-end tests for ``PearAIServerClient.stream_complete``."""
from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from pearai_providers.base.errors import (
    ErrorCode,
    ProviderError,
    StreamReadError,
    TransportError,
    UsageAccountingDisabled,
)
from pearai_providers.base.models import CompletionOptions
from pearai_providers.base.resilience import RetryConfig
from pearai_providers.config.defaults import COMPLETION_TOKENS_EVENT, PROMPT_TOKENS_EVENT
from pearai_providers.telemetry import LocalUsageRecorder

from .helpers import ChunkStream, FailingCompletionRecorder, ListHandler, ndjson


async def _collect(client, prompt, options=None, **overrides):
    try:
        return [chunk async for chunk in client.stream_complete(prompt, options, **overrides)]
    finally:
        await client.aclose()


def test_streams_chunks_and_sends_truncated_stop(make_client, recorder, counter):
    handler = ListHandler(lambda req: httpx.Response(200, content=ndjson('"hello"', '" world"')))
    client = make_client(handler)
    options = CompletionOptions(model="gpt-4o", stop=["\n", "\n\n", "\t", "x"], max_tokens=64)

    chunks = asyncio.run(_collect(client, "def add(a, b):", options))

    assert chunks == ["hello", " world"]  # nosec B101
    (request,) = handler.requests
    assert request.url.path == "/stream_complete"  # nosec B101
    body = json.loads(request.content)
    assert body == {"prompt": "def add(a, b):", "model": "gpt-4o", "max_tokens": 64, "stop": ["\n", "\n\n"]}  # nosec B101
    assert request.headers["uniqueId"] == "uid-1"  # nosec B101
    assert request.headers["extensionVersion"] == "1.2.3"  # nosec B101
    assert request.headers["content-type"] == "application/json"  # nosec B101
    assert "authorization" not in request.headers  # nosec B101
    assert counter.texts == ["def add(a, b):", "hello world"]  # nosec B101
    assert [e.name for e in recorder.events] == [PROMPT_TOKENS_EVENT, COMPLETION_TOKENS_EVENT]  # nosec B101
    assert recorder.events[0].properties == {"tokens": 3, "model": "gpt-4o"}  # nosec B101
    assert recorder.events[1].properties == {"tokens": 2, "model": "gpt-4o"}  # nosec B101


def test_starcoder_keeps_all_stop_sequences(make_client):
    handler = ListHandler(lambda req: httpx.Response(200, content=b""))
    client = make_client(handler)

    asyncio.run(_collect(client, "x", model="starcoder-7b", stop=["a", "b", "c"]))

    assert json.loads(handler.requests[0].content)["stop"] == ["a", "b", "c"]  # nosec B101


def test_raw_text_and_non_string_lines_are_yielded_as_text(make_client):
    client = make_client(lambda req: httpx.Response(200, content=ndjson('"a"', "plain", '{"k": 1}')))
    assert asyncio.run(_collect(client, "x")) == ["a", "plain", '{"k": 1}']  # nosec B101


def test_usage_disabled_raises_before_any_request(make_client):
    handler = ListHandler(lambda req: httpx.Response(200, content=ndjson('"a"')))
    client = make_client(handler, usage_recorder=LocalUsageRecorder(enabled=False))

    with pytest.raises(UsageAccountingDisabled) as ei:
        client.stream_complete("hi")
    assert ei.value.code is ErrorCode.USAGE_DISABLED  # nosec B101
    assert handler.requests == []  # nosec B101
    asyncio.run(client.aclose())


def test_http_error_status_maps_to_transport_error(make_client, recorder):
    client = make_client(lambda req: httpx.Response(503, text="maintenance"))

    with pytest.raises(TransportError) as ei:
        asyncio.run(_collect(client, "x"))
    assert ei.value.status_code == 503  # nosec B101
    assert ei.value.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert "maintenance" in ei.value.message  # nosec B101
    assert recorder.events_named(COMPLETION_TOKENS_EVENT)[-1].properties["tokens"] == 0  # nosec B101


def test_connect_failure_maps_to_transport_error(make_client):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(refuse)
    with pytest.raises(TransportError) as ei:
        asyncio.run(_collect(client, "x"))
    assert ei.value.code is ErrorCode.UNAVAILABLE  # nosec B101


def test_mid_stream_failure_keeps_partial_output(make_client, counter):
    body = ChunkStream([b'"hel"\n', b'"lo"\n'], error=httpx.ReadError("reset"))
    client = make_client(lambda req: httpx.Response(200, stream=body))
    got = []

    async def consume():
        try:
            async for chunk in client.stream_complete("x"):
                got.append(chunk)
        finally:
            await client.aclose()

    with pytest.raises(StreamReadError):
        asyncio.run(consume())
    assert got == ["hel", "lo"]  # nosec B101
    assert counter.texts[-1] == "hello"  # nosec B101
    assert body.closed  # nosec B101


def test_cancellation_closes_response_and_records_partial_usage(make_client, counter):
    body = ChunkStream([b'"one"\n', b'"two"\n', b'"three"\n'])
    client = make_client(lambda req: httpx.Response(200, stream=body))

    async def consume_first():
        stream = client.stream_complete("x")
        first = await stream.__anext__()
        await stream.aclose()
        await client.aclose()
        return first

    assert asyncio.run(consume_first()) == "one"  # nosec B101
    assert body.closed  # nosec B101
    assert body.read_count == 1  # nosec B101
    assert counter.texts[-1] == "one"  # nosec B101


def test_retry_reopens_request_on_transient_status(make_client, monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    statuses = iter([502, 200])
    handler = ListHandler(lambda req: httpx.Response(next(statuses), content=ndjson('"ok"')))
    client = make_client(handler, retry_config=RetryConfig(max_attempts=2, delay_base=1.5))

    assert asyncio.run(_collect(client, "x")) == ["ok"]  # nosec B101
    assert len(handler.requests) == 2  # nosec B101
    assert delays == [1.0]  # nosec B101


def test_complete_returns_joined_text(make_client):
    client = make_client(lambda req: httpx.Response(200, content=ndjson('"a"', '"b"')))

    async def run():
        async with client:
            return await client.complete("x")

    assert asyncio.run(run()) == "ab"  # nosec B101


def test_plain_text_body_passes_through_unchanged(make_client, counter):
    source = b"def f():\n\n    return 1\n"
    body = ChunkStream([b"def f", b"():\n", b"\n    return", b" 1\n"])
    client = make_client(lambda req: httpx.Response(200, stream=body))

    chunks = asyncio.run(_collect(client, "x"))

    assert "".join(chunks) == source.decode("utf-8")  # nosec B101
    assert counter.texts[-1] == source.decode("utf-8")  # nosec B101


def test_plain_text_keeps_leading_blank_lines_and_split_characters(make_client):
    source = "\n\n# größe\nx = 1".encode("utf-8")
    split = source.index("ö".encode("utf-8")) + 1
    client = make_client(lambda req: httpx.Response(200, stream=ChunkStream([source[:split], source[split:]])))

    assert "".join(asyncio.run(_collect(client, "x"))) == "\n\n# größe\nx = 1"  # nosec B101


def test_failed_completion_usage_capture_is_logged_not_raised(make_client, log_events):
    recorder = FailingCompletionRecorder(COMPLETION_TOKENS_EVENT)
    client = make_client(
        lambda req: httpx.Response(200, content=ndjson('"a"', '"b"')),
        usage_recorder=recorder,
    )

    assert asyncio.run(_collect(client, "x")) == ["a", "b"]  # nosec B101
    (level, payload), = log_events.named("usage.record_error")
    assert level == logging.WARNING  # nosec B101
    assert "analytics backend unreachable" in payload["error"]  # nosec B101
    assert [e.name for e in recorder.events] == [PROMPT_TOKENS_EVENT]  # nosec B101


def test_http_failure_is_logged_as_failed_from_sent(make_client, log_events):
    client = make_client(lambda req: httpx.Response(500, text="boom"))

    with pytest.raises(TransportError):
        asyncio.run(_collect(client, "x"))
    (level, payload), = log_events.named("stream.error")
    assert level == logging.ERROR  # nosec B101
    assert payload["state"] == "failed"  # nosec B101
    assert payload["from_state"] == "sent"  # nosec B101
    assert payload["error_code"] == "server_error"  # nosec B101


def test_cancel_while_opening_is_a_failure(make_client, log_events):
    async def run():
        started = asyncio.Event()

        async def hang(request):
            started.set()
            await asyncio.Event().wait()

        client = make_client(hang)

        async def consume():
            return [chunk async for chunk in client.stream_complete("x")]

        task = asyncio.create_task(consume())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await client.aclose()

    asyncio.run(run())
    (_, payload), = log_events.named("stream.error")
    assert payload["state"] == "failed"  # nosec B101
    assert payload["from_state"] == "sent"  # nosec B101
    assert payload["error_code"] == "cancelled"  # nosec B101


def test_closing_mid_stream_is_logged_as_cancelled(make_client, log_events):
    client = make_client(lambda req: httpx.Response(200, stream=ChunkStream([b'"one"\n', b'"two"\n'])))

    async def run():
        stream = client.stream_complete("x")
        await stream.__anext__()
        await stream.aclose()
        await client.aclose()

    asyncio.run(run())
    (level, payload), = log_events.named("stream.end")
    assert level == logging.INFO  # nosec B101
    assert payload["state"] == "cancelled"  # nosec B101
    assert payload["from_state"] == "streaming"  # nosec B101


def test_unknown_option_override_is_a_validation_error(make_client):
    handler = ListHandler(lambda req: httpx.Response(200, content=b""))
    client = make_client(handler)

    with pytest.raises(ProviderError) as ei:
        client.stream_complete("x", topp=1)
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101
    assert handler.requests == []  # nosec B101
    asyncio.run(client.aclose())
