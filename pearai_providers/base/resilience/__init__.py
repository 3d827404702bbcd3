"""Resilience helpers (retry policy)."""

from .retry import NO_RETRY, RetryConfig, retry

__all__ = ["NO_RETRY", "RetryConfig", "retry"]
