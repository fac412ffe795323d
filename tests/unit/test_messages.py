"""Wire message tests."""

import pytest
from returns.result import Failure, Success

from a2ui_bridge.core import MessageParseError
from a2ui_bridge.protocol import (
    BeginRendering,
    DataModelUpdate,
    DeleteSurface,
    SurfaceUpdate,
    UnknownMessage,
    parse_message,
    try_parse_message,
)


@pytest.mark.unit
def test_parse_begin_rendering():
    """Test beginRendering with styles."""
    message = parse_message(
        {"beginRendering": {"surfaceId": "main", "root": "card", "styles": {"font": "Inter"}}}
    )
    assert isinstance(message, BeginRendering)
    assert message.surface_id == "main"
    assert message.root == "card"
    assert message.styles == {"font": "Inter"}


@pytest.mark.unit
def test_parse_surface_update_keeps_entries_raw():
    """Test component entries are not validated at parse time."""
    message = parse_message({"surfaceUpdate": {"components": [{"id": "x"}, "junk"]}})
    assert isinstance(message, SurfaceUpdate)
    assert message.surface_id is None
    assert message.components == [{"id": "x"}, "junk"]


@pytest.mark.unit
def test_parse_data_model_update_defaults():
    """Test dataModelUpdate defaults to the root path."""
    message = parse_message({"dataModelUpdate": {"contents": []}})
    assert isinstance(message, DataModelUpdate)
    assert message.path == ""


@pytest.mark.unit
def test_parse_delete_surface():
    """Test deleteSurface."""
    message = parse_message({"deleteSurface": {"surfaceId": "main"}})
    assert isinstance(message, DeleteSurface)
    assert message.surface_id == "main"


@pytest.mark.unit
def test_parse_unknown_kind():
    """Test envelopes without a known kind parse as UnknownMessage."""
    message = parse_message({"styleUpdate": {}})
    assert isinstance(message, UnknownMessage)
    assert message.keys == ("styleUpdate",)


@pytest.mark.unit
def test_parse_message_passthrough():
    """Test parsed messages are returned as is."""
    message = DeleteSurface(surface_id="x")
    assert parse_message(message) is message


@pytest.mark.unit
@pytest.mark.parametrize(
    "envelope",
    [
        "not an object",
        [],
        {"beginRendering": {"root": "a"}, "deleteSurface": {}},
        {"surfaceUpdate": ["not", "an", "object"]},
        {"beginRendering": {"surfaceId": "x"}},  # root is required
        {"surfaceUpdate": {"components": "nope"}},
    ],
)
def test_parse_message_malformed(envelope):
    """Test malformed envelopes raise."""
    with pytest.raises(MessageParseError):
        parse_message(envelope)


@pytest.mark.unit
def test_try_parse_message():
    """Test the Result-returning variant."""
    ok = try_parse_message({"deleteSurface": {}})
    assert isinstance(ok, Success)
    assert isinstance(ok.unwrap(), DeleteSurface)

    failed = try_parse_message({"beginRendering": 1})
    assert isinstance(failed, Failure)
    assert "beginRendering" in failed.failure().message


@pytest.mark.unit
def test_to_wire_roundtrip():
    """Test messages render back to their envelope."""
    envelope = {"beginRendering": {"surfaceId": "s", "root": "r", "styles": {"primaryColor": "#fff"}}}
    assert parse_message(envelope).to_wire() == envelope
