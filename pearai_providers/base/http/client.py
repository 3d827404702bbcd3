"""Async HTTP client construction for the PearAI client.

Purpose:
    Build the ``httpx.AsyncClient`` used for the streaming endpoints with
    timeouts derived exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Lifecycle & cleanup:
    - An ``AsyncClient`` is bound to the event loop it is first used on, so
      clients are not pooled at module level. Each ``PearAIServerClient``
      owns one instance and closes it in ``aclose``.
    - Tests inject an ``httpx.MockTransport`` through ``transport``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import TimeoutConfig, get_timeout_config


def create_async_client(
    base_url: str,
    *,
    timeout_config: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` rooted at ``base_url``.

    Parameters:
        base_url: Server URL; endpoint paths are joined relative to it.
        timeout_config: Explicit timeouts; defaults to the process config.
        transport: Optional transport override (mock transports in tests).

    Returns:
        An unopened ``httpx.AsyncClient``; the caller owns closing it.
    """
    cfg = timeout_config or get_timeout_config()
    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        timeout=cfg.to_httpx(),
        transport=transport,
    )


__all__ = ["create_async_client"]
