"""Raised when the server is used without usage accounting consent."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError

USAGE_DISABLED_MESSAGE = (
    "The PearAI server can only be used with usage accounting enabled so that abuse can be "
    "monitored. Enable it with PEARAI_TELEMETRY=1 (or `telemetry: true` in the config file) "
    "or pass an enabled UsageRecorder. Using your own model never requires it."
)


class UsageAccountingDisabled(ProviderError):
    """Fatal to the call; raised before any network I/O."""

    def __init__(self, model: Optional[str] = None, message: str = USAGE_DISABLED_MESSAGE) -> None:
        super().__init__(code=ErrorCode.USAGE_DISABLED, message=message, model=model)


__all__ = ["UsageAccountingDisabled", "USAGE_DISABLED_MESSAGE"]
