"""Request timeout configuration for the PearAI client.

The upstream server protocol defines no timeouts; this module supplies the
bounded defaults used for every outbound request and converts them into an
``httpx.Timeout``.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and whenever they change. Supported environment variables (all
    optional, positive floats):
        PEARAI_TIMEOUT_CONNECT_SECONDS
        PEARAI_TIMEOUT_READ_SECONDS
        PEARAI_TIMEOUT_WRITE_SECONDS
        PEARAI_TIMEOUT_POOL_SECONDS

Read timeout semantics
----------------------
``read_timeout_seconds`` bounds the wait for the *next* body chunk, so it is
the idle limit of a stream rather than a cap on its total duration.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        read_timeout_seconds: Idle time allowed between two body chunks.
        write_timeout_seconds: Sending the request body.
        pool_timeout_seconds: Waiting for a free pooled connection.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 60.0
    write_timeout_seconds: float = 30.0
    pool_timeout_seconds: float = 10.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.pool_timeout_seconds,
        )


_ENV_FIELDS = {
    "connect_timeout_seconds": "PEARAI_TIMEOUT_CONNECT_SECONDS",
    "read_timeout_seconds": "PEARAI_TIMEOUT_READ_SECONDS",
    "write_timeout_seconds": "PEARAI_TIMEOUT_WRITE_SECONDS",
    "pool_timeout_seconds": "PEARAI_TIMEOUT_POOL_SECONDS",
}

_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance.

    The cache is refreshed when any of the supported environment variables
    changed since the last call, which lets tests adjust values at runtime.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_FIELDS.values())
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        **{field: _parse_env_float(env, getattr(defaults, field)) for field, env in _ENV_FIELDS.items()}
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
