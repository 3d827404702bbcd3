"""Per-call lifecycle states of a streaming request."""
from __future__ import annotations

from enum import Enum


class StreamState(str, Enum):
    """Lifecycle of one completion/chat call.

    ``FAILED`` is reachable from ``SENT`` and ``STREAMING``; ``CANCELLED``
    only from ``STREAMING`` (the caller stopped consuming).
    """

    IDLE = "idle"
    REQUEST_BUILT = "request_built"
    AUTH_RESOLVED = "auth_resolved"
    SENT = "sent"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (StreamState.COMPLETED, StreamState.FAILED, StreamState.CANCELLED)


__all__ = ["StreamState"]
