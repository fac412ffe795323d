"""Incremental decoding of streamed protocol messages."""

from .stream import MessageStream, astream_messages, stream_messages

__all__ = ["MessageStream", "stream_messages", "astream_messages"]
