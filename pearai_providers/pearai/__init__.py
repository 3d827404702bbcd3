"""PearAI server provider: streaming completion/chat client."""

from .client import PearAIServerClient
from .helpers import convert_args, convert_message, truncate_stop

__all__ = ["PearAIServerClient", "convert_args", "convert_message", "truncate_stop"]
