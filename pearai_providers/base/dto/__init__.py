"""Wire DTOs (pydantic) for request bodies."""

from .completion import CompletionArgsDTO, WireContentPartDTO, WireMessageDTO

__all__ = ["CompletionArgsDTO", "WireContentPartDTO", "WireMessageDTO"]
