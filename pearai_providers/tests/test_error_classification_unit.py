from __future__ import annotations

import asyncio

import httpx

from pearai_providers.base.errors import (
    ErrorCode,
    ProviderError,
    TransportError,
    UsageAccountingDisabled,
    classify_exception,
    status_to_code,
)


def test_provider_error_passthrough():
    assert classify_exception(UsageAccountingDisabled(model="gpt-4o")) is ErrorCode.USAGE_DISABLED  # nosec B101
    assert classify_exception(ProviderError(code=ErrorCode.CONFLICT, message="x")) is ErrorCode.CONFLICT  # nosec B101


def test_timeouts_and_connection_failures():
    req = httpx.Request("POST", "http://x")
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow", request=req)) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused", request=req)) is ErrorCode.UNAVAILABLE  # nosec B101


def test_status_mapping():
    assert status_to_code(401) is ErrorCode.AUTH  # nosec B101
    assert status_to_code(429) is ErrorCode.RATE_LIMIT  # nosec B101
    assert status_to_code(599) is ErrorCode.SERVER_ERROR  # nosec B101
    assert status_to_code(418) is ErrorCode.UNKNOWN  # nosec B101


def test_message_heuristics():
    assert classify_exception(RuntimeError("Rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(RuntimeError("something odd")) is ErrorCode.UNKNOWN  # nosec B101


def test_transport_error_retryable_follows_code():
    assert TransportError("x", status_code=502, code=ErrorCode.TRANSIENT).retryable is True  # nosec B101
    assert TransportError("x", status_code=400, code=ErrorCode.VALIDATION).retryable is False  # nosec B101
