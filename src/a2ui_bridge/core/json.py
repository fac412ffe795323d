"""Wire JSON codec: msgspec for decoding, orjson for encoding, json_repair as last resort."""

from typing import Any

import msgspec
import orjson
from json_repair import repair_json

from .validate import MessageParseError, validate_payload_size, validate_json_depth, MAX_JSON_DEPTH

_decoder = msgspec.json.Decoder()


class JSONParseError(MessageParseError):
    """JSON parsing failed."""

    pass


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding markdown code block, if any.

    LLMs asked for raw JSON still sometimes answer with ```json ... ```.
    """
    if "```" not in text:
        return text

    if "```json" in text:
        start_marker = text.find("```json") + 7
    else:
        start_marker = text.find("```") + 3

    end_marker = text.find("```", start_marker)
    if end_marker == -1:
        return text[start_marker:].strip()
    return text[start_marker:end_marker].strip()


def decode_json(data: str | bytes, repair: bool = False) -> Any:
    """
    Decode one JSON document.

    Args:
        data: JSON text or bytes
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Decoded value

    Raises:
        JSONParseError: If decoding fails
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data

    try:
        return _decoder.decode(raw)
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e
        original = e

    text = raw.decode("utf-8", errors="replace")
    repaired = repair_json(text)
    if not repaired or repaired == '""':
        raise JSONParseError(f"JSON repair failed: {original}", original)
    try:
        return _decoder.decode(repaired.encode("utf-8"))
    except msgspec.DecodeError as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error


def _as_envelopes(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                raise JSONParseError(
                    f"Expected message object at index {index}, got {type(item).__name__}"
                )
        return list(value)
    raise JSONParseError(f"Expected message object or array, got {type(value).__name__}")


def decode_payload(
    data: str | bytes,
    repair: bool = False,
    max_bytes: int | None = None,
    max_depth: int = MAX_JSON_DEPTH,
) -> list[dict[str, Any]]:
    """
    Decode a transport payload into raw message envelopes.

    Accepts a single message object, a JSON array of messages, or JSONL
    (one message per line), optionally wrapped in a markdown code block.

    Args:
        data: Payload text or bytes
        repair: Attempt to repair damaged JSON
        max_bytes: Optional payload size limit
        max_depth: Nesting depth limit

    Returns:
        List of envelope dictionaries, in payload order

    Raises:
        JSONParseError: If the payload is malformed
        MessageParseError: If a transport limit is exceeded
    """
    if max_bytes is not None:
        validate_payload_size(data, max_bytes)

    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    text = strip_code_fence(text.strip())
    if not text:
        return []

    try:
        value = decode_json(text)
    except JSONParseError as e:
        lines = [line for line in text.splitlines() if line.strip()]
        if len(lines) > 1:
            try:
                value = [decode_json(line) for line in lines]
            except JSONParseError:
                if not repair:
                    raise e
                value = decode_json(text, repair=True)
        elif repair:
            value = decode_json(text, repair=True)
        else:
            raise

    validate_json_depth(value, max_depth)
    return _as_envelopes(value)


def encode_json(obj: Any) -> bytes:
    """Encode object to compact JSON bytes."""
    return orjson.dumps(obj)
