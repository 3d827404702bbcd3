"""Network-level or HTTP status failure while issuing a request."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class TransportError(ProviderError):
    """Request could not be sent or the server answered with an error status.

    ``status_code`` is set when the server responded; it is ``None`` for
    connection-level failures.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.TRANSIENT,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            model=model,
            retryable=code in (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE),
            raw=raw,
        )
        self.status_code = status_code


__all__ = ["TransportError"]
