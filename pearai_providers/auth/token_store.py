"""In-process token cache with serialized refresh.

Purpose:
    Default :class:`~pearai_providers.auth.interfaces.TokenSource`. Holds the
    current :class:`AuthTokens` and exchanges them through an injected
    ``refresher`` coroutine once the access token is (about to be) expired.

Concurrency:
    Refresh runs under an ``asyncio.Lock`` and expiry is re-checked inside the
    lock, so N concurrent callers hitting an expired token trigger exactly one
    refresh and all observe the refreshed pair.

Failure semantics:
    Every failure (no tokens, no refresher, refresher raised) surfaces as
    :class:`AuthResolutionFailed`. The stored tokens are left untouched when a
    refresh fails.
"""
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Mapping, Optional

from ..base.errors import AuthResolutionFailed
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import PROVIDER_NAME, TOKEN_EXPIRY_LEEWAY_SECONDS
from .tokens import AuthTokens

Refresher = Callable[[AuthTokens], Awaitable[AuthTokens]]


class TokenStore:
    """Token cache implementing ``check_token_expired``."""

    def __init__(
        self,
        tokens: Optional[AuthTokens] = None,
        refresher: Optional[Refresher] = None,
        *,
        leeway: float = TOKEN_EXPIRY_LEEWAY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._tokens = tokens
        self._refresher = refresher
        self._leeway = leeway
        self._clock = clock
        self._lock = asyncio.Lock()
        self._logger = get_logger("pearai_providers.auth")
        self.refresh_count = 0

    @classmethod
    def from_config(cls, cfg: Mapping[str, object], refresher: Optional[Refresher] = None) -> "TokenStore":
        """Seed the store from ``access_token``/``refresh_token`` config keys."""
        access = cfg.get("access_token")
        tokens = AuthTokens(access_token=str(access), refresh_token=str(cfg.get("refresh_token") or "")) if access else None
        return cls(tokens, refresher)

    @property
    def tokens(self) -> Optional[AuthTokens]:
        return self._tokens

    def set_tokens(self, tokens: Optional[AuthTokens]) -> None:
        """Replace the stored pair (sign-in / sign-out)."""
        self._tokens = tokens

    def _expired(self, tokens: AuthTokens) -> bool:
        return tokens.is_expired(self._leeway, self._clock())

    async def check_token_expired(self) -> AuthTokens:
        """Return a valid token pair, refreshing it first when expired."""
        tokens = self._tokens
        if tokens is None:
            raise AuthResolutionFailed("no tokens stored; sign in first")
        if not self._expired(tokens):
            return tokens

        async with self._lock:
            tokens = self._tokens
            if tokens is None:
                raise AuthResolutionFailed("tokens cleared while waiting for refresh")
            if not self._expired(tokens):
                return tokens
            if self._refresher is None:
                raise AuthResolutionFailed("access token expired and no refresher is configured")
            try:
                refreshed = await self._refresher(tokens)
            except AuthResolutionFailed:
                raise
            except Exception as e:
                raise AuthResolutionFailed(f"token refresh failed: {e}", raw=e) from e
            self._tokens = refreshed
            self.refresh_count += 1
            normalized_log_event(
                self._logger,
                "auth.refreshed",
                LogContext(provider=PROVIDER_NAME),
                phase="auth",
                expires_at=refreshed.expires_at,
            )
            return refreshed


__all__ = ["Refresher", "TokenStore"]
