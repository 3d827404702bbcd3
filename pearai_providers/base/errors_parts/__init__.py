"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `pearai_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, status_to_code
from .usage_accounting_disabled import UsageAccountingDisabled
from .auth_resolution_failed import AuthResolutionFailed
from .transport_error import TransportError
from .stream_errors import StreamDecodeError, StreamReadError
from .usage_recording_error import UsageRecordingError

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "status_to_code",
    "UsageAccountingDisabled",
    "AuthResolutionFailed",
    "TransportError",
    "StreamReadError",
    "StreamDecodeError",
    "UsageRecordingError",
]
