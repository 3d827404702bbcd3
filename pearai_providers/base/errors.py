"""Unified client error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``pearai_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, status_to_code
from .errors_parts.usage_accounting_disabled import UsageAccountingDisabled
from .errors_parts.auth_resolution_failed import AuthResolutionFailed
from .errors_parts.transport_error import TransportError
from .errors_parts.stream_errors import StreamDecodeError, StreamReadError
from .errors_parts.usage_recording_error import UsageRecordingError

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
