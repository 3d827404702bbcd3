"""
Chat message model.

Defines the `Message` dataclass and the `Role` literal. Content is either
plain text or an ordered list of `ContentPart` objects. Streamed chat deltas
are also delivered as `Message` instances with ``role="assistant"``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Union

from .content_part import ContentPart

Role = Literal["system", "user", "assistant"]


@dataclass
class Message:
    """A chat message.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"`` or
            ``"assistant"``).
        content: Either a plain text string or a list of `ContentPart` items.
    """

    role: Role
    content: Union[str, List[ContentPart]]

    def is_structured(self) -> bool:
        """Return True if the message content is a structured list of parts."""
        return isinstance(self.content, list)

    def text_or_joined(self) -> str:
        """Return a flattened text view of the content.

        Text parts are joined with newlines; parts without text are
        represented by a bracketed type token.
        """
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text if p.text else f"[{p.type}]" for p in self.content)


__all__ = [
    "Message",
    "Role",
]
