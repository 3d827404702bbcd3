"""PearAI server helpers module.

Purpose:
- Provide reusable, side-effect-free utilities for the PearAI client
  (argument conversion, message normalization, header assembly, retry
  logging and request opening) to keep ``client.py`` focused on the call
  lifecycle.

External dependencies:
- ``httpx`` for the request/response objects (no SDK).
- ``pydantic`` through the wire DTOs in ``base.dto``.

Failure semantics:
- Transport failures and HTTP error statuses are classified to ``ErrorCode``
  and raised as ``TransportError``. No retry happens here; see
  ``base.resilience.retry``.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

import httpx

from ..base.dto import CompletionArgsDTO, WireContentPartDTO, WireMessageDTO
from ..base.errors import ProviderError, TransportError, classify_exception, status_to_code
from ..base.logging import LogContext, normalized_log_event
from ..base.models import CompletionOptions, Message
from ..base.resilience import RetryConfig
from ..config.defaults import IMAGE_DETAIL, STOP_SEQUENCE_LIMIT, UNLIMITED_STOP_MODELS

JSON_CONTENT_TYPE = "application/json"
_ERROR_BODY_PREVIEW = 500


def truncate_stop(
    model: str,
    stop: Optional[Sequence[str]],
    *,
    limit: int = STOP_SEQUENCE_LIMIT,
    unlimited_models: Collection[str] = UNLIMITED_STOP_MODELS,
) -> Optional[List[str]]:
    """Apply the per-model stop sequence cap.

    Models in ``unlimited_models`` keep every stop sequence; all others keep
    the first ``limit`` entries. ``None`` stays ``None``.
    """
    if stop is None:
        return None
    if model in unlimited_models:
        return list(stop)
    return list(stop[:limit])


def convert_args(
    options: CompletionOptions,
    *,
    stop_limit: int = STOP_SEQUENCE_LIMIT,
    unlimited_stop_models: Collection[str] = UNLIMITED_STOP_MODELS,
) -> CompletionArgsDTO:
    """Convert caller options into the validated wire arguments.

    Raises:
        pydantic.ValidationError: empty model or non-positive ``max_tokens``.
    """
    return CompletionArgsDTO(
        model=options.model,
        frequency_penalty=options.frequency_penalty,
        presence_penalty=options.presence_penalty,
        max_tokens=options.max_tokens,
        stop=truncate_stop(
            options.model,
            options.stop,
            limit=stop_limit,
            unlimited_models=unlimited_stop_models,
        ),
        temperature=options.temperature,
        top_p=options.top_p,
    )


def convert_message(message: Message, *, image_detail: str = IMAGE_DETAIL) -> Dict[str, Any]:
    """Normalize a message for the chat endpoint.

    String content passes through unchanged. Structured content is mapped so
    every part carries ``type``, ``text`` and an ``image_url`` mapping with
    the fixed detail hint.
    """
    if not message.is_structured():
        return {"role": message.role, "content": message.content}
    parts = [
        WireContentPartDTO(
            type=part.type,
            text=part.text,
            image_url={**(part.image_url or {}), "detail": image_detail},
        )
        for part in message.content
    ]
    return WireMessageDTO(role=message.role, content=parts).model_dump(exclude_none=True)


def join_messages_text(messages: Sequence[Message]) -> str:
    """Return the newline-joined text of all messages (prompt token estimate)."""
    return "\n".join(m.text_or_joined() for m in messages)


def build_headers(identity: Mapping[str, str], access_token: Optional[str] = None) -> Dict[str, str]:
    """Merge identity headers, the JSON content type and optional bearer auth."""
    headers = {"Content-Type": JSON_CONTENT_TYPE, **identity}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def with_attempt_logging(
    config: RetryConfig,
    logger: logging.Logger,
    ctx: LogContext,
    *,
    phase: str,
) -> RetryConfig:
    """Return ``config`` with an attempt logger emitting ``retry.attempt`` events.

    A caller-supplied attempt logger is kept.
    """
    if config.attempt_logger is not None or config.max_attempts <= 1:
        return config

    def _attempt_logger(*, attempt: int, max_attempts: int, delay, error: ProviderError | None):
        normalized_log_event(
            logger,
            "retry.attempt",
            ctx,
            phase=phase,
            attempt=attempt,
            max_attempts=max_attempts,
            delay=delay,
            error_code=(error.code.value if error else None),
            will_retry=bool(error and delay is not None),
        )

    return dataclasses.replace(config, attempt_logger=_attempt_logger)


async def open_stream(
    http: httpx.AsyncClient,
    path: str,
    *,
    headers: Mapping[str, str],
    body: Mapping[str, Any],
    model: Optional[str] = None,
) -> httpx.Response:
    """POST ``body`` to ``path`` and return the open streaming response.

    The caller owns the returned response and must ``aclose`` it.

    Raises:
        TransportError: the request could not be sent, or the server answered
            with a status >= 400 (the error body preview is in the message).
    """
    request = http.build_request("POST", path, headers=dict(headers), json=dict(body))
    try:
        response = await http.send(request, stream=True)
    except httpx.HTTPError as e:
        raise TransportError(
            f"POST {path} failed: {e}",
            code=classify_exception(e),
            model=model,
            raw=e,
        ) from e
    if response.status_code >= 400:
        try:
            detail = (await response.aread()).decode("utf-8", "replace")[:_ERROR_BODY_PREVIEW]
        except httpx.HTTPError:
            detail = ""
        finally:
            await response.aclose()
        message = f"POST {path} returned HTTP {response.status_code}"
        raise TransportError(
            f"{message}: {detail}" if detail else message,
            code=status_to_code(response.status_code),
            model=model,
            status_code=response.status_code,
        )
    return response


__all__ = [
    "JSON_CONTENT_TYPE",
    "build_headers",
    "convert_args",
    "convert_message",
    "join_messages_text",
    "open_stream",
    "truncate_stop",
    "with_attempt_logging",
]
