"""Usage accounting: recorder protocol, in-memory recorder and token counting."""

from .interfaces import UsageRecorder
from .local_recorder import LocalUsageRecorder
from .token_counter import SupportsTokenCount, TokenCounter
from .usage_event import UsageEvent

__all__ = [
    "LocalUsageRecorder",
    "SupportsTokenCount",
    "TokenCounter",
    "UsageEvent",
    "UsageRecorder",
]
