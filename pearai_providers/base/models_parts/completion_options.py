"""
Caller-facing completion options.

`CompletionOptions` mirrors the sampling knobs an editor passes with every
completion or chat call. The PearAI client converts it into the wire
arguments (see ``pearai.helpers.convert_args``).
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Optional


@dataclass
class CompletionOptions:
    """Sampling options for a single completion/chat call.

    Attributes:
        model: Target model identifier.
        frequency_penalty: Optional frequency penalty.
        presence_penalty: Optional presence penalty.
        max_tokens: Maximum tokens to generate.
        stop: Ordered stop sequences (the client may truncate them).
        temperature: Sampling temperature.
        top_p: Nucleus sampling mass.
    """

    model: str
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    max_tokens: Optional[int] = None
    stop: Optional[List[str]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    def merged(self, **overrides: Any) -> "CompletionOptions":
        """Return a copy with the non-``None`` ``overrides`` applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


__all__ = ["CompletionOptions"]
