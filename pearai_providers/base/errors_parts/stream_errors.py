"""Errors raised while reading or decoding a streamed response body."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class StreamReadError(ProviderError):
    """The transport failed mid-stream.

    Raised only after every chunk decoded before the failure was yielded.
    """

    def __init__(self, message: str, *, model: Optional[str] = None, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.TRANSIENT, message=message, model=model, raw=raw)


class StreamDecodeError(ProviderError):
    """A streamed line was not valid JSON (``MalformedLinePolicy.RAISE`` only)."""

    def __init__(self, message: str, *, line: str = "", raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, raw=raw)
        self.line = line


__all__ = ["StreamReadError", "StreamDecodeError"]
