"""Explicit command registry.

Maps command identifiers to handlers. The registry is built at startup and
handed the active UI sink as a dependency; handlers receive that sink
explicitly instead of reaching for a module-level view reference.

Contract:
    - ``register(command, handler)`` adds a handler; duplicates are rejected
      unless ``replace=True``.
    - ``dispatch(command, *args, **kwargs)`` calls the handler with the sink
      as first argument and awaits the result when it is awaitable.
    - Unknown identifiers raise :class:`CommandNotFound`.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Protocol, Union, runtime_checkable


@runtime_checkable
class UISink(Protocol):
    """Destination for messages addressed to the user interface."""

    def post_message(self, message: Mapping[str, Any]) -> None:  # pragma: no cover - interface
        ...


CommandHandler = Callable[..., Union[Any, Awaitable[Any]]]


class CommandNotFound(KeyError):
    """Raised when dispatching an identifier that has no handler."""


class CommandRegistry:
    """Registry of command handlers bound to one UI sink."""

    def __init__(self, sink: UISink) -> None:
        self._sink = sink
        self._handlers: Dict[str, CommandHandler] = {}

    @property
    def sink(self) -> UISink:
        return self._sink

    def register(self, command: str, handler: CommandHandler, *, replace: bool = False) -> None:
        """Register ``handler`` under ``command``.

        Raises:
            ValueError: ``command`` is already registered and ``replace`` is False.
        """
        if not command:
            raise ValueError("command identifier must be non-empty")
        if command in self._handlers and not replace:
            raise ValueError(f"command '{command}' already registered")
        self._handlers[command] = handler

    def unregister(self, command: str) -> None:
        self._handlers.pop(command, None)

    def commands(self) -> List[str]:
        """Registered identifiers, sorted."""
        return sorted(self._handlers)

    def __contains__(self, command: object) -> bool:
        return command in self._handlers

    async def dispatch(self, command: str, *args: Any, **kwargs: Any) -> Any:
        handler = self._handlers.get(command)
        if handler is None:
            raise CommandNotFound(command)
        result = handler(self._sink, *args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__ = ["CommandHandler", "CommandNotFound", "CommandRegistry", "UISink"]
