"""Collaborator protocols for identity headers and bearer tokens.

Both are consumed by the PearAI client and owned by the host application.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from .tokens import AuthTokens


@runtime_checkable
class HeaderProvider(Protocol):
    """Supplies identity headers (caller identity and version, no bearer auth)."""

    async def get_headers(self) -> Mapping[str, str]:  # pragma: no cover - interface
        ...


@runtime_checkable
class TokenSource(Protocol):
    """Supplies a currently valid token pair, refreshing it when expired.

    Implementations must serialize refreshes so concurrent callers observe the
    same refreshed token. Failures raise; the chat path treats them as
    non-fatal.
    """

    async def check_token_expired(self) -> AuthTokens:  # pragma: no cover - interface
        ...


__all__ = ["HeaderProvider", "TokenSource"]
