"""Captured usage event record."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class UsageEvent:
    """One captured usage event.

    Attributes:
        name: Event name (``free_trial_prompt_tokens`` etc.).
        properties: Event payload (``tokens``, ``model`` ...).
        ts: Capture time (unix seconds).
    """

    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    ts: float = 0.0


__all__ = ["UsageEvent"]
