"""Access/refresh token pair handed out by a token source."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthTokens:
    """Bearer credentials for the PearAI server.

    Attributes:
        access_token: Token sent as ``Authorization: Bearer``.
        refresh_token: Token exchanged for a new pair when the access token
            expires.
        expires_at: Unix timestamp after which ``access_token`` is invalid;
            ``None`` means the expiry is unknown and never triggers a refresh.
    """

    access_token: str
    refresh_token: str = ""
    expires_at: Optional[float] = None

    def is_expired(self, leeway: float = 0.0, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return current >= self.expires_at - leeway


__all__ = ["AuthTokens"]
