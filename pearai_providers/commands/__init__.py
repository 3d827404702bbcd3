"""Command registry with an injected UI sink, plus built-in commands."""

from .defaults import LIST_MODELS, QUICK_CHAT, register_default_commands
from .registry import CommandHandler, CommandNotFound, CommandRegistry, UISink

__all__ = [
    "CommandHandler",
    "CommandNotFound",
    "CommandRegistry",
    "LIST_MODELS",
    "QUICK_CHAT",
    "UISink",
    "register_default_commands",
]
