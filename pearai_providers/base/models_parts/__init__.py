"""Model parts: one dataclass per module, re-exported by ``base.models``."""

from .content_part import ContentPart, ContentPartType
from .message import Message, Role
from .completion_options import CompletionOptions

__all__ = ["ContentPart", "ContentPartType", "Message", "Role", "CompletionOptions"]
