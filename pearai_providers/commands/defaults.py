"""Built-in commands backed by the PearAI client.

``pearai.listModels`` posts ``{"type": "models", "models": [...]}``.
``pearai.quickChat`` streams an answer to a single user prompt as
``{"type": "chatDelta", "content": ...}`` messages followed by one
``{"type": "chatDone", "content": <full text>}``; a provider failure is
posted as ``{"type": "chatError", "code": ..., "message": ...}`` after the
deltas received so far.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import List, Optional

from ..base.errors import ProviderError
from ..base.models import CompletionOptions, Message
from ..pearai import PearAIServerClient
from .registry import CommandRegistry, UISink

LIST_MODELS = "pearai.listModels"
QUICK_CHAT = "pearai.quickChat"


def register_default_commands(registry: CommandRegistry, client: PearAIServerClient) -> CommandRegistry:
    """Register the built-in commands on ``registry`` and return it."""

    def list_models(sink: UISink) -> List[str]:
        models = client.list_models()
        sink.post_message({"type": "models", "models": models})
        return models

    async def quick_chat(sink: UISink, prompt: str, model: Optional[str] = None, system: Optional[str] = None) -> str:
        messages = [Message(role="system", content=system)] if system else []
        messages.append(Message(role="user", content=prompt))
        options = CompletionOptions(model=model) if model else None
        parts: List[str] = []
        try:
            async with aclosing(client.stream_chat(messages, options)) as stream:
                async for delta in stream:
                    text = delta.text_or_joined()
                    parts.append(text)
                    sink.post_message({"type": "chatDelta", "content": text})
        except ProviderError as e:
            sink.post_message({"type": "chatError", "code": e.code.value, "message": e.message})
            raise
        full = "".join(parts)
        sink.post_message({"type": "chatDone", "content": full})
        return full

    registry.register(LIST_MODELS, list_models)
    registry.register(QUICK_CHAT, quick_chat)
    return registry


__all__ = ["LIST_MODELS", "QUICK_CHAT", "register_default_commands"]
