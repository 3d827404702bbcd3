from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Caller-configurable retry policy for opening a request.

    The server protocol performs no retries, so the default is a single
    attempt. Retries never apply once the first chunk has been yielded.
    """

    max_attempts: int = 1
    delay_base: float = 2.0  # exponential base (delay_base ** attempt)
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: AttemptLogger | None = None

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield self.delay_base**attempt


NO_RETRY = RetryConfig()


def retry(config: RetryConfig = NO_RETRY):
    """Return a decorator applying the retry policy to an async callable.

    - Retries only on configured retryable error codes
    - Exponential backoff using ``delay_base ** attempt`` (``asyncio.sleep``)
    - Preserves the wrapped coroutine function's signature
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            delays = list(config.delays()) + [None]  # final attempt has delay None
            for attempt, delay in enumerate(delays):
                try:
                    result = await func(*args, **kwargs)
                except ProviderError as e:
                    if config.attempt_logger:
                        config.attempt_logger(
                            attempt=attempt,
                            max_attempts=config.max_attempts,
                            delay=delay,
                            error=e,
                        )
                    if e.code in config.retryable_codes and delay is not None:
                        await asyncio.sleep(delay)
                        continue
                    raise
                if config.attempt_logger:
                    config.attempt_logger(
                        attempt=attempt,
                        max_attempts=config.max_attempts,
                        delay=None,
                        error=None,
                    )
                return result
            raise RuntimeError("retry: no attempts configured")

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "NO_RETRY",
    "retry",
]
