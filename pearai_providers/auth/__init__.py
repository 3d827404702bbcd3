"""Identity headers and bearer-token resolution for the PearAI client."""

from .headers import IdentityHeaderProvider
from .interfaces import HeaderProvider, TokenSource
from .token_store import Refresher, TokenStore
from .tokens import AuthTokens

__all__ = [
    "AuthTokens",
    "HeaderProvider",
    "IdentityHeaderProvider",
    "Refresher",
    "TokenSource",
    "TokenStore",
]
