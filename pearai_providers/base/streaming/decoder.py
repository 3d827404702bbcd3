"""Stream decoder for newline-delimited JSON and raw text response bodies.

Purpose:
    Turn a live ``httpx.Response`` body into a lazy, finite, non-restartable
    async sequence of chunks. Reading is pull-driven: the next body chunk is
    only requested when the consumer asks for the next decoded value, so the
    decoder never reads ahead of what the transport itself buffers.

Modes:
    - ``stream_json``: split on newlines (see :class:`LineBuffer`), parse each
      complete line as JSON and yield the parsed value.
    - ``stream_text``: yield decoded text segments as they arrive.

Malformed lines:
    Handling of a line that is not valid JSON is an explicit policy
    (:class:`MalformedLinePolicy`) chosen by the caller:
    - ``SKIP``: emit a ``stream.decode_error`` log event and continue.
    - ``TEXT``: the first non-blank line decides the body mode. When it parses
      as JSON the body is decoded line by line and any later undecodable line
      is yielded as raw text. When it does not, the whole body is passed
      through as text, unchanged (newlines and blank lines included). This
      lets the completion endpoint stream either JSON strings or plain text.
    - ``RAISE``: raise :class:`StreamDecodeError`.

Failure semantics:
    A transport failure while reading raises :class:`StreamReadError` after
    every chunk decoded before the failure has been yielded.
"""
from __future__ import annotations

import codecs
import json
import logging
from enum import Enum
from typing import Any, AsyncIterator, Optional

import httpx

from ..errors import StreamDecodeError, StreamReadError
from ..logging import LogContext, get_logger, normalized_log_event
from .line_buffer import LineBuffer

_SKIPPED = object()


class MalformedLinePolicy(str, Enum):
    """What to do with a streamed line that is not valid JSON."""

    SKIP = "skip"
    TEXT = "text"
    RAISE = "raise"


async def _iter_body(response: httpx.Response, ctx: Optional[LogContext]) -> AsyncIterator[bytes]:
    """Yield raw body chunks, converting transport failures to StreamReadError."""
    try:
        async for chunk in response.aiter_bytes():
            if chunk:
                yield chunk
    except httpx.TransportError as e:
        raise StreamReadError(
            f"stream interrupted: {e}",
            model=ctx.model if ctx else None,
            raw=e,
        ) from e


def _decode_line(
    line: str,
    policy: MalformedLinePolicy,
    logger: logging.Logger,
    ctx: Optional[LogContext],
) -> Any:
    try:
        return json.loads(line)
    except json.JSONDecodeError as e:
        if policy is MalformedLinePolicy.TEXT:
            return line
        if policy is MalformedLinePolicy.RAISE:
            raise StreamDecodeError(f"malformed stream line: {e.msg}", line=line, raw=e) from e
        normalized_log_event(
            logger,
            "stream.decode_error",
            ctx,
            phase="mid_stream",
            level=logging.WARNING,
            error=str(e),
            line=line[:200],
        )
        return _SKIPPED


def _first_content_line(text: str) -> Optional[str]:
    """Return the first complete non-blank line of ``text``, or ``None``."""
    for line in text.split("\n")[:-1]:
        if line.strip():
            return line.strip()
    return None


def _is_json(line: str) -> bool:
    try:
        json.loads(line)
    except json.JSONDecodeError:
        return False
    return True


async def _stream_sniffed(
    response: httpx.Response,
    log: logging.Logger,
    ctx: Optional[LogContext],
) -> AsyncIterator[Any]:
    encoding = response.encoding or "utf-8"
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    body = _iter_body(response, ctx)
    seen = ""
    first_line: Optional[str] = None
    async for chunk in body:
        seen += decoder.decode(chunk)
        first_line = _first_content_line(seen)
        if first_line is not None:
            break
    else:
        seen += decoder.decode(b"", final=True)
        if not seen.strip():
            return
        first_line = seen.strip().split("\n", 1)[0].strip()

    if not _is_json(first_line):
        normalized_log_event(log, "stream.mode", ctx, phase="mid_stream", level=logging.DEBUG, mode="text")
        yield seen
        async for chunk in body:
            text = decoder.decode(chunk)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail
        return

    buffer = LineBuffer(encoding)
    for line in buffer.feed_text(seen):
        yield _decode_line(line, MalformedLinePolicy.TEXT, log, ctx)
    async for chunk in body:
        for line in buffer.feed_text(decoder.decode(chunk)):
            yield _decode_line(line, MalformedLinePolicy.TEXT, log, ctx)
    buffer.feed_text(decoder.decode(b"", final=True))
    for line in buffer.flush():
        yield _decode_line(line, MalformedLinePolicy.TEXT, log, ctx)


async def stream_json(
    response: httpx.Response,
    *,
    policy: MalformedLinePolicy = MalformedLinePolicy.SKIP,
    ctx: Optional[LogContext] = None,
    logger: Optional[logging.Logger] = None,
) -> AsyncIterator[Any]:
    """Yield one parsed JSON value per complete line of ``response``.

    Partial trailing lines are buffered until completed by later data; an
    unterminated final line is decoded at end of stream.
    """
    log = logger or get_logger("pearai_providers.stream")
    if policy is MalformedLinePolicy.TEXT:
        async for value in _stream_sniffed(response, log, ctx):
            yield value
        return
    buffer = LineBuffer(response.encoding or "utf-8")
    async for chunk in _iter_body(response, ctx):
        for line in buffer.feed(chunk):
            value = _decode_line(line, policy, log, ctx)
            if value is not _SKIPPED:
                yield value
    for line in buffer.flush():
        value = _decode_line(line, policy, log, ctx)
        if value is not _SKIPPED:
            yield value


async def stream_text(
    response: httpx.Response,
    *,
    ctx: Optional[LogContext] = None,
) -> AsyncIterator[str]:
    """Yield decoded text segments of ``response`` as they arrive."""
    decoder = codecs.getincrementaldecoder(response.encoding or "utf-8")(errors="replace")
    async for chunk in _iter_body(response, ctx):
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


__all__ = [
    "MalformedLinePolicy",
    "stream_json",
    "stream_text",
]
