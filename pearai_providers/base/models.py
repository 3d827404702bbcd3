"""Core data models for the PearAI client.

Re-exports the dataclasses under ``models_parts`` to keep a stable import path.
"""
from __future__ import annotations

from .models_parts import CompletionOptions, ContentPart, ContentPartType, Message, Role

__all__ = [
    "CompletionOptions",
    "ContentPart",
    "ContentPartType",
    "Message",
    "Role",
]
