"""Tests for the stream handler."""

from unittest.mock import MagicMock

import pytest

from a2ui_bridge.core import MessageParseError, Settings
from a2ui_bridge.handlers import StreamHandler
from a2ui_bridge.processor import MessageProcessor
from a2ui_bridge.streaming import MessageStream

RESPONSE = (
    '[{"beginRendering": {"surfaceId": "@default", "root": "card"}},'
    '{"surfaceUpdate": {"surfaceId": "@default", "components": ['
    '{"id": "card", "component": {"Card": {"children": ["title"]}}},'
    '{"id": "title", "component": {"Text": {"text": {"literalString": "Hello"}}}}]}}]'
)


def chunked(text, size):
    return [text[i:i + size] for i in range(0, len(text), size)]


@pytest.mark.unit
def test_stream_handler_initialization(processor):
    """Test the handler builds its decoder from processor settings."""
    handler = StreamHandler(processor)
    assert handler.processor is processor
    assert handler.stream.repair is processor.settings.repair_json
    assert handler.errors == []


@pytest.mark.unit
def test_handle_chunks(processor):
    """Test snapshots are published as messages complete."""
    handler = StreamHandler(processor)

    published = []
    for chunk in chunked(RESPONSE, 10):
        published.extend(handler.handle_chunk(chunk))
    published.extend(handler.finish())

    assert len(published) == 2
    assert handler.messages_applied == 2
    assert published[-1].tree.children[0].id == "title"


@pytest.mark.unit
def test_consume(processor):
    """Test a whole sync stream."""
    snapshots = StreamHandler(processor).consume(chunked(RESPONSE, 16))
    assert processor.current_snapshot("@default") is snapshots[-1]


@pytest.mark.unit
async def test_aconsume(processor):
    """Test a whole async stream."""

    async def chunks():
        for chunk in chunked(RESPONSE, 8):
            yield chunk

    snapshots = await StreamHandler(processor).aconsume(chunks())
    assert [s.version for s in snapshots] == [1, 2]


@pytest.mark.unit
def test_lenient_mode_skips_bad_messages(processor):
    """Test bad messages are collected and the stream carries on."""
    handler = StreamHandler(processor)
    payload = '{"beginRendering": {}} {"oops": tru} {"beginRendering": {"root": "ok"}}'

    snapshots = handler.consume([payload])

    assert len(handler.errors) == 2
    assert all(isinstance(e, MessageParseError) for e in handler.errors)
    assert [s.root for s in snapshots] == ["ok"]


@pytest.mark.unit
def test_strict_mode_raises(processor):
    """Test strict mode stops at the first bad message."""
    handler = StreamHandler(processor, strict=True)

    with pytest.raises(MessageParseError):
        handler.handle_chunk('{"beginRendering": {}}')


@pytest.mark.unit
def test_truncated_stream(processor):
    """Test an unterminated final message is reported without repair."""
    handler = StreamHandler(processor, stream=MessageStream(repair=False))
    handler.handle_chunk('{"beginRendering": {"root": "car')

    assert handler.finish() == []
    assert len(handler.errors) == 1


@pytest.mark.unit
def test_metrics_recorded():
    """Test chunk and parse-error counters."""
    metrics = MagicMock()
    processor = MessageProcessor(settings=Settings(), metrics=metrics)
    handler = StreamHandler(processor)

    handler.consume(['{"beginRendering": {}}', ' '])

    assert metrics.record_stream_chunk.call_count == 2
    metrics.record_parse_error.assert_any_call("stream")


@pytest.mark.unit
def test_good_messages_survive_bad_neighbour_and_truncated_end(processor):
    """Test complete messages beside a bad one are applied before the stream ends."""
    handler = StreamHandler(processor, stream=MessageStream(repair=False))

    handler.handle_chunk('{"bad": } {"beginRendering": {"surfaceId": "s", "root": "r"}} {"surfaceUpdate": ')
    handler.finish()

    assert processor.surface_ids() == ["s"]
    assert processor.current_snapshot("s").root == "r"
    assert handler.messages_applied == 1
    assert len(handler.errors) == 2


@pytest.mark.unit
def test_strict_mode_applies_nothing_after_error(processor):
    """Test strict mode stops without applying queued messages."""
    handler = StreamHandler(processor, stream=MessageStream(repair=False), strict=True)

    with pytest.raises(MessageParseError):
        handler.handle_chunk('{"bad": } {"beginRendering": {"surfaceId": "s", "root": "r"}}')
    assert processor.surface_ids() == []
