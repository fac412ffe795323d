"""Incremental message decoding for streamed producer output.

An LLM answers with a JSON array (or JSONL, or objects back to back), and the
transport hands it over in arbitrary slices. :class:`MessageStream` tracks
brace depth outside of strings and hands out each top-level object as soon as
its closing brace arrives. Anything between objects (array brackets, commas,
markdown fences, prose) is skipped.
"""

from typing import Any, AsyncIterator, Iterable
from collections.abc import AsyncGenerator, Generator
from dataclasses import dataclass, field

from ..core.json import decode_json
from ..core.logging_config import get_logger
from ..core.validate import MAX_JSON_DEPTH, MessageParseError, validate_json_depth

logger = get_logger(__name__)


@dataclass
class MessageStream:
    """Splits a chunked stream into complete message envelopes."""

    repair: bool = False
    max_depth: int = MAX_JSON_DEPTH
    _buffer: str = field(default="", init=False, repr=False)
    _scan_pos: int = field(default=0, init=False, repr=False)
    _depth: int = field(default=0, init=False, repr=False)
    _in_string: bool = field(default=False, init=False, repr=False)
    _escape: bool = field(default=False, init=False, repr=False)
    _ready: list[dict[str, Any]] = field(default_factory=list, init=False, repr=False)

    def feed(self, chunk: str) -> list[dict[str, Any]]:
        """
        Add a chunk, return envelopes completed so far.

        Raises:
            MessageParseError: If an object completed in this chunk is not
                valid JSON. The bad object is dropped; envelopes completed
                alongside it stay queued for :meth:`drain` or the next call.
        """
        self._buffer += chunk
        error = self._scan()
        if error is not None:
            raise error
        return self.drain()

    def flush(self) -> list[dict[str, Any]]:
        """
        End of stream: return what is left.

        An unterminated trailing object is repaired when ``repair`` is set,
        otherwise reported.

        Raises:
            MessageParseError: If the stream ended inside a message. Envelopes
                completed earlier stay queued for :meth:`drain`.
        """
        remainder = self._buffer if self._depth > 0 else ""
        self._reset()

        if remainder:
            if not self.repair:
                raise MessageParseError(f"Stream ended inside a message ({len(remainder)} chars)")
            value = decode_json(remainder, repair=True)
            if not isinstance(value, dict):
                raise MessageParseError("Stream ended inside a message that could not be repaired")
            logger.info("stream_message_repaired", chars=len(remainder))
            self._ready.append(value)

        return self.drain()

    @property
    def pending(self) -> bool:
        """True while a message is partially received."""
        return self._depth > 0

    def drain(self) -> list[dict[str, Any]]:
        """Take the envelopes completed so far, even after a raise."""
        ready, self._ready = self._ready, []
        return ready

    def _reset(self) -> None:
        self._buffer = ""
        self._scan_pos = 0
        self._depth = 0
        self._in_string = False
        self._escape = False

    def _scan(self) -> MessageParseError | None:
        buffer = self._buffer
        error: MessageParseError | None = None
        start = 0 if self._depth > 0 else None

        for index in range(self._scan_pos, len(buffer)):
            char = buffer[index]

            if self._depth == 0:
                if char == "{":
                    start = index
                    self._depth = 1
                continue

            if self._in_string:
                if self._escape:
                    self._escape = False
                elif char == "\\":
                    self._escape = True
                elif char == '"':
                    self._in_string = False
            elif char == '"':
                self._in_string = True
            elif char == "{":
                self._depth += 1
            elif char == "}":
                self._depth -= 1
                if self._depth == 0 and start is not None:
                    try:
                        self._ready.append(self._decode(buffer[start : index + 1]))
                    except MessageParseError as e:
                        logger.error("stream_message_dropped", error=str(e))
                        error = error or e
                    start = None

        if self._depth > 0 and start is not None:
            self._buffer = buffer[start:]
            self._scan_pos = len(self._buffer)
        else:
            self._buffer = ""
            self._scan_pos = 0
        return error

    def _decode(self, text: str) -> dict[str, Any]:
        value = decode_json(text)
        if not isinstance(value, dict):
            raise MessageParseError(f"Expected message object, got {type(value).__name__}")
        validate_json_depth(value, self.max_depth)
        return value


def stream_messages(chunks: Iterable[str], repair: bool = False) -> Generator[dict[str, Any], None, None]:
    """
    Decode envelopes from a sync chunk stream.

    Args:
        chunks: Text chunks in arrival order
        repair: Repair an unterminated final message

    Yields:
        Envelopes as they complete
    """
    stream = MessageStream(repair=repair)

    for chunk in chunks:
        yield from stream.feed(chunk)

    # Flush remaining
    yield from stream.flush()


async def astream_messages(
    chunks: AsyncIterator[str], repair: bool = False
) -> AsyncGenerator[dict[str, Any], None]:
    """
    Decode envelopes from an async chunk stream.

    Args:
        chunks: Async text chunks in arrival order
        repair: Repair an unterminated final message

    Yields:
        Envelopes as they complete
    """
    stream = MessageStream(repair=repair)

    async for chunk in chunks:
        for envelope in stream.feed(chunk):
            yield envelope

    # Flush remaining
    for envelope in stream.flush():
        yield envelope
