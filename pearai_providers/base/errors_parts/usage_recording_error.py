"""Failure inside the usage recorder. Logged, never surfaced to callers."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class UsageRecordingError(ProviderError):
    def __init__(self, message: str, *, model: Optional[str] = None, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message, model=model, raw=raw)


__all__ = ["UsageRecordingError"]
