"""
Structured content part of a chat message.

A part carries either text or an image reference. Image references are kept
as the mapping the caller supplied (typically ``{"url": ...}``); the client
adds the detail hint when forwarding.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional

ContentPartType = Literal["text", "image_url"]


@dataclass
class ContentPart:
    """A single piece of structured message content.

    Attributes:
        type: ``"text"`` or ``"image_url"``.
        text: Text for ``"text"`` parts.
        image_url: Image reference mapping for ``"image_url"`` parts.
    """

    type: ContentPartType
    text: Optional[str] = None
    image_url: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the part."""
        return asdict(self)


__all__ = [
    "ContentPart",
    "ContentPartType",
]
