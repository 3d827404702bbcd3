"""pearai_providers package

Streaming client for the PearAI server (text completion and chat).

Purpose:
    Provide a small, stable API for editor integrations and scripts
    (packaging is configured via the repository root ``pyproject.toml``).
    Collaborators (identity headers, token source, usage recorder) are
    injected into :class:`PearAIServerClient`; defaults come from the layered
    configuration in ``pearai_providers.config``.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`PearAIServerClient`
    - Models: :class:`Message`, :class:`ContentPart`, :class:`CompletionOptions`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and the
      specialised subclasses
    - Collaborators: :class:`IdentityHeaderProvider`, :class:`TokenStore`,
      :class:`AuthTokens`, :class:`LocalUsageRecorder`, :class:`TokenCounter`
    - Commands: :class:`CommandRegistry`, :func:`register_default_commands`
"""

from .auth import AuthTokens, HeaderProvider, IdentityHeaderProvider, TokenSource, TokenStore
from .base.errors import (
    AuthResolutionFailed,
    ErrorCode,
    ProviderError,
    StreamDecodeError,
    StreamReadError,
    TransportError,
    UsageAccountingDisabled,
    UsageRecordingError,
)
from .base.models import CompletionOptions, ContentPart, Message
from .base.streaming import MalformedLinePolicy, StreamState
from .commands import CommandRegistry, register_default_commands
from .pearai import PearAIServerClient
from .telemetry import LocalUsageRecorder, TokenCounter, UsageRecorder

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AuthResolutionFailed",
    "AuthTokens",
    "CommandRegistry",
    "CompletionOptions",
    "ContentPart",
    "ErrorCode",
    "HeaderProvider",
    "IdentityHeaderProvider",
    "LocalUsageRecorder",
    "MalformedLinePolicy",
    "Message",
    "PearAIServerClient",
    "ProviderError",
    "StreamDecodeError",
    "StreamReadError",
    "StreamState",
    "TokenCounter",
    "TokenSource",
    "TokenStore",
    "TransportError",
    "UsageAccountingDisabled",
    "UsageRecorder",
    "UsageRecordingError",
    "register_default_commands",
]
