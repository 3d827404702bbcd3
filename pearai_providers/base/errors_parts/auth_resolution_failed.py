"""Token refresh / lookup failure.

Chat requests treat this as non-fatal and continue without a bearer token.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class AuthResolutionFailed(ProviderError):
    """The token source could not produce a usable access token."""

    def __init__(self, message: str, *, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, raw=raw)


__all__ = ["AuthResolutionFailed"]
