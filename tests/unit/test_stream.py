"""Tests for the streaming message decoder."""

import pytest

from a2ui_bridge.core import MessageParseError
from a2ui_bridge.streaming import MessageStream, astream_messages, stream_messages

RESPONSE = (
    'Here is the UI:\n```json\n['
    '{"beginRendering": {"surfaceId": "@default", "root": "card"}},\n'
    '{"surfaceUpdate": {"components": [{"id": "title", "component": '
    '{"Text": {"text": {"literalString": "a } brace and a \\" quote"}}}}]}}'
    ']\n```'
)


def chunked(text, size):
    return [text[i:i + size] for i in range(0, len(text), size)]


@pytest.mark.unit
def test_feed_whole_response():
    """Test a complete response in one chunk."""
    stream = MessageStream()
    envelopes = stream.feed(RESPONSE)

    assert [list(e)[0] for e in envelopes] == ["beginRendering", "surfaceUpdate"]
    assert stream.flush() == []


@pytest.mark.unit
@pytest.mark.parametrize("size", [1, 3, 7, 64])
def test_feed_in_chunks(size):
    """Test arbitrary chunk boundaries give the same envelopes."""
    stream = MessageStream()
    envelopes = []
    for chunk in chunked(RESPONSE, size):
        envelopes.extend(stream.feed(chunk))
    envelopes.extend(stream.flush())

    assert envelopes == MessageStream().feed(RESPONSE)
    text = envelopes[1]["surfaceUpdate"]["components"][0]["component"]["Text"]["text"]
    assert text["literalString"] == 'a } brace and a " quote'


@pytest.mark.unit
def test_envelope_emitted_when_complete():
    """Test envelopes are handed out as soon as they close."""
    stream = MessageStream()
    assert stream.feed('[{"deleteSurface": {') == []
    assert stream.pending
    assert stream.feed('}}, {"begin') == [{"deleteSurface": {}}]
    assert stream.pending


@pytest.mark.unit
def test_jsonl_stream():
    """Test one envelope per line."""
    envelopes = list(stream_messages(['{"deleteSurface": {}}\n{"delete', 'Surface": {}}\n']))
    assert envelopes == [{"deleteSurface": {}}, {"deleteSurface": {}}]


@pytest.mark.unit
def test_flush_incomplete_without_repair():
    """Test a stream cut off mid-message is reported."""
    stream = MessageStream(repair=False)
    stream.feed('{"beginRendering": {"root": "card"')

    with pytest.raises(MessageParseError):
        stream.flush()
    assert not stream.pending


@pytest.mark.unit
def test_flush_incomplete_with_repair():
    """Test a truncated final message is repaired."""
    stream = MessageStream(repair=True)
    stream.feed('{"beginRendering": {"root": "card"')

    assert stream.flush() == [{"beginRendering": {"root": "card"}}]


@pytest.mark.unit
def test_malformed_object_dropped():
    """Test a bad object raises but good neighbours survive."""
    stream = MessageStream()
    with pytest.raises(MessageParseError):
        stream.feed('{"deleteSurface": {}} {"bad": tru} {"deleteSurface": {}}')

    assert stream.flush() == [{"deleteSurface": {}}, {"deleteSurface": {}}]


@pytest.mark.unit
def test_depth_limit():
    """Test overly nested envelopes are rejected."""
    stream = MessageStream(max_depth=2)
    with pytest.raises(MessageParseError):
        stream.feed('{"a": {"b": {"c": {"d": 1}}}}')


@pytest.mark.unit
def test_stream_messages_sync():
    """Test the sync helper."""
    envelopes = list(stream_messages(chunked(RESPONSE, 5)))
    assert len(envelopes) == 2


@pytest.mark.unit
async def test_astream_messages():
    """Test the async helper."""

    async def chunks():
        for chunk in chunked(RESPONSE, 4):
            yield chunk

    envelopes = [envelope async for envelope in astream_messages(chunks())]
    assert [list(e)[0] for e in envelopes] == ["beginRendering", "surfaceUpdate"]


@pytest.mark.unit
def test_drain_after_truncated_flush():
    """Test queued envelopes survive a flush that raises."""
    stream = MessageStream(repair=False)
    with pytest.raises(MessageParseError):
        stream.feed('{"bad": } {"deleteSurface": {}} {"surfaceUpdate": ')

    with pytest.raises(MessageParseError):
        stream.flush()
    assert stream.drain() == [{"deleteSurface": {}}]
    assert stream.drain() == []
