"""UsageRecorder Protocol (single-class module).

Opt-in usage accounting sink. The PearAI client consults ``is_enabled``
before any network call and refuses to talk to the server without consent.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class UsageRecorder(Protocol):
    """Interface for usage accounting sinks."""

    def is_enabled(self) -> bool:  # pragma: no cover - interface
        """Return True when the user consented to usage accounting."""
        ...

    def capture(self, event: str, properties: Mapping[str, Any]) -> None:  # pragma: no cover - interface
        """Record one usage event (e.g. ``free_trial_prompt_tokens``)."""
        ...


__all__ = ["UsageRecorder"]
