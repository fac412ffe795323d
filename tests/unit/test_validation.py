"""Validation tests."""

import pytest

from a2ui_bridge.core import (
    MessageParseError,
    ParseFailure,
    ProtocolError,
    validate_json_depth,
    validate_payload_size,
)


@pytest.mark.unit
def test_validate_payload_size():
    """Test payload size validation."""
    validate_payload_size('{"test": "data"}', 1000)  # Should pass

    with pytest.raises(MessageParseError):
        validate_payload_size("x" * 2000, 1000)


@pytest.mark.unit
def test_validate_payload_size_counts_bytes():
    """Test size is measured in encoded bytes."""
    validate_payload_size("é" * 5, 10)
    with pytest.raises(MessageParseError):
        validate_payload_size("é" * 6, 10)


@pytest.mark.unit
def test_validate_json_depth():
    """Test JSON depth validation."""
    shallow = {"a": {"b": {"c": 1}}}
    validate_json_depth(shallow, max_depth=5)  # Should pass

    deep = {"a": [{"b": [{"c": [1]}]}]}
    with pytest.raises(MessageParseError):
        validate_json_depth(deep, max_depth=3)


@pytest.mark.unit
def test_error_hierarchy():
    """Test parse errors are protocol errors and keep the cause."""
    cause = ValueError("bad")
    error = MessageParseError("wrapped", cause)

    assert isinstance(error, ProtocolError)
    assert error.original is cause
    assert str(error) == "wrapped"


@pytest.mark.unit
def test_parse_failure_frozen():
    """Test ParseFailure is an immutable value."""
    failure = ParseFailure("broken", payload="{")
    with pytest.raises(Exception):
        failure.message = "other"  # type: ignore[misc]
