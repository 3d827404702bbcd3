"""Token estimation for usage accounting.

Uses tiktoken's ``cl100k_base`` encoding when the library and its encoding
files are available; otherwise falls back to a character estimate
(``ceil(len(text) / 4)``). The estimate only feeds usage events, so an
approximate count is acceptable.
"""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

try:
    import tiktoken  # type: ignore
except ImportError:  # pragma: no cover
    tiktoken = None  # type: ignore

from ..base.logging import get_logger

DEFAULT_ENCODING = "cl100k_base"
CHARS_PER_TOKEN = 4


@runtime_checkable
class SupportsTokenCount(Protocol):
    def count(self, text: str) -> int:  # pragma: no cover - interface
        ...


class TokenCounter:
    """Count tokens with tiktoken, or estimate from length.

    Attributes:
        encoding: Loaded tiktoken encoding, or ``None`` in estimate mode.
    """

    def __init__(self, encoding_name: str = DEFAULT_ENCODING, *, use_tiktoken: bool = True) -> None:
        self.encoding = None
        if use_tiktoken and tiktoken is not None:
            try:
                self.encoding = tiktoken.get_encoding(encoding_name)
            except Exception as e:  # pragma: no cover - offline / missing encoding files
                get_logger("pearai_providers.usage").warning(
                    "Failed to load tiktoken encoding",
                    extra={"encoding": encoding_name, "error": str(e)},
                )

    def count(self, text: str) -> int:
        if not text:
            return 0
        if self.encoding is not None:
            return len(self.encoding.encode(text, disallowed_special=()))
        return math.ceil(len(text) / CHARS_PER_TOKEN)


__all__ = ["SupportsTokenCount", "TokenCounter", "CHARS_PER_TOKEN"]
