"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ProtocolError,
    MessageParseError,
    ParseFailure,
    validate_payload_size,
    validate_json_depth,
)
from .logging_config import configure_logging, configure_from_settings, get_logger, LogContext
from .json import (
    JSONParseError,
    decode_json,
    decode_payload,
    encode_json,
    strip_code_fence,
)
from .hash import hash_bytes, fingerprint


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ProtocolError",
    "MessageParseError",
    "ParseFailure",
    "validate_payload_size",
    "validate_json_depth",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "LogContext",
    # JSON
    "JSONParseError",
    "decode_json",
    "decode_payload",
    "encode_json",
    "strip_code_fence",
    # Hashing
    "hash_bytes",
    "fingerprint",
]
