"""Shared fakes for the test suite (response bodies, token counter, handlers)."""

from __future__ import annotations

import json
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import httpx

from pearai_providers.telemetry import LocalUsageRecorder


class ChunkStream(httpx.AsyncByteStream):
    """Response body yielding fixed chunks, optionally failing afterwards.

    Records whether it was closed so tests can assert cleanup.
    """

    def __init__(self, chunks: Sequence[bytes], error: Optional[Exception] = None) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.closed = False
        self.read_count = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.read_count += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


class FakeTokenCounter:
    """Counts whitespace separated words and remembers every counted text."""

    def __init__(self) -> None:
        self.texts: List[str] = []

    def count(self, text: str) -> int:
        self.texts.append(text)
        return len(text.split())


class ListHandler:
    """Collect requests seen by a ``MockTransport`` and answer via ``respond``."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def ndjson(*lines: str) -> bytes:
    return "".join(f"{line}\n" for line in lines).encode("utf-8")



class FailingCompletionRecorder(LocalUsageRecorder):
    """Enabled recorder whose ``capture`` raises for one event name."""

    def __init__(self, failing_event: str) -> None:
        super().__init__(enabled=True)
        self.failing_event = failing_event

    def capture(self, event, properties) -> None:
        if event == self.failing_event:
            raise RuntimeError("analytics backend unreachable")
        super().capture(event, properties)


class EventCollector(logging.Handler):
    """Collect structured log events as ``(levelno, payload)`` pairs."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def named(self, event: str) -> List[Tuple[int, dict]]:
        out = []
        for record in self.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict) and payload.get("event") == event:
                out.append((record.levelno, payload))
        return out
