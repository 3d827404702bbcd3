"""Thread-safe in-memory usage recorder.

Default :class:`UsageRecorder`: keeps every captured event in memory and
emits a ``usage.capture`` log line for it. Shipping events to a remote
analytics service is the host application's job; it can wrap or replace this
recorder.
"""

from __future__ import annotations

import time
from threading import RLock
from typing import Any, List, Mapping, Optional

from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import PROVIDER_NAME
from .usage_event import UsageEvent


class LocalUsageRecorder:
    """Usage recorder gated on an explicit enablement flag."""

    def __init__(self, enabled: bool = False, *, max_events: Optional[int] = 10_000) -> None:
        self._enabled = enabled
        self._max_events = max_events
        self._lock = RLock()
        self._events: List[UsageEvent] = []
        self._logger = get_logger("pearai_providers.usage")

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def capture(self, event: str, properties: Mapping[str, Any]) -> None:
        props = dict(properties)
        with self._lock:
            self._events.append(UsageEvent(name=event, properties=props, ts=time.time()))
            if self._max_events is not None and len(self._events) > self._max_events:
                del self._events[: len(self._events) - self._max_events]
        normalized_log_event(
            self._logger,
            "usage.capture",
            LogContext(provider=PROVIDER_NAME, model=props.get("model")),
            phase="usage",
            tokens=props.get("tokens"),
            usage_event=event,
        )

    @property
    def events(self) -> List[UsageEvent]:
        """Snapshot of captured events, oldest first."""
        with self._lock:
            return list(self._events)

    def events_named(self, name: str) -> List[UsageEvent]:
        return [e for e in self.events if e.name == name]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


__all__ = ["LocalUsageRecorder"]
