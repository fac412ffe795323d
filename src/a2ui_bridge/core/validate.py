"""Transport-boundary validation and the error taxonomy."""

from dataclasses import dataclass
from typing import Any

# Validation limits
MAX_MESSAGE_BYTES = 512 * 1024  # 512KB
MAX_JSON_DEPTH = 32


class ProtocolError(Exception):
    """Base class for errors raised at the protocol boundary."""

    pass


class MessageParseError(ProtocolError):
    """A transport payload or envelope could not be parsed.

    The message is dropped; no surface state is touched.
    """

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


@dataclass(frozen=True)
class ParseFailure:
    """Parse error with details (for Result pattern)."""

    message: str
    payload: str | None = None


def validate_payload_size(data: str | bytes, max_bytes: int = MAX_MESSAGE_BYTES) -> None:
    """
    Validate transport payload size.

    Args:
        data: Raw payload
        max_bytes: Maximum allowed size in bytes

    Raises:
        MessageParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
    if size > max_bytes:
        raise MessageParseError(f"Payload size {size} bytes exceeds maximum {max_bytes} bytes")


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent runaway recursion.

    Args:
        obj: Decoded JSON value
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        MessageParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise MessageParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
