"""
Pydantic DTOs for the PearAI server request bodies.

Purpose
-------
Validate and serialize the JSON bodies posted to ``/stream_complete`` and
``/server_chat``. Fields that are unset are omitted from the body
(``model_dump(exclude_none=True)``), so the server only sees what the caller
actually specified.

External dependencies: Pydantic v2 only. No I/O.

Failure modes: construction raises ``pydantic.ValidationError``; the client
wraps it in a ``ProviderError`` with ``ErrorCode.VALIDATION``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CompletionArgsDTO(BaseModel):
    """Sampling arguments shared by both endpoints (snake_case on the wire)."""

    model_config = ConfigDict(protected_namespaces=())

    model: str = Field(..., min_length=1)
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    stop: Optional[List[str]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON-ready mapping with unset fields dropped."""
        return self.model_dump(exclude_none=True)


class WireContentPartDTO(BaseModel):
    """A structured content part as forwarded to the chat endpoint.

    ``image_url`` is always present and always carries the detail hint, even
    for text parts.
    """

    type: str
    text: Optional[str] = None
    image_url: Dict[str, Any]


class WireMessageDTO(BaseModel):
    """A chat message as forwarded to the chat endpoint."""

    role: Literal["system", "user", "assistant"]
    content: Union[str, List[WireContentPartDTO]]


__all__ = [
    "CompletionArgsDTO",
    "WireContentPartDTO",
    "WireMessageDTO",
]
