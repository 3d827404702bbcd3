"""Streaming package: line buffering, body decoding and call lifecycle states."""

from .decoder import MalformedLinePolicy, stream_json, stream_text
from .line_buffer import LineBuffer
from .state import StreamState

__all__ = [
    "LineBuffer",
    "MalformedLinePolicy",
    "StreamState",
    "stream_json",
    "stream_text",
]
