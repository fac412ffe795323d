"""Stream Handler."""

from typing import AsyncIterable, Iterable

from ..core.logging_config import get_logger
from ..core.validate import MessageParseError
from ..processor import MessageProcessor, SurfaceSnapshot
from ..streaming import MessageStream

logger = get_logger(__name__)


class StreamHandler:
    """
    Feeds a producer's chunked output into a processor.

    In strict mode the first malformed message raises. Otherwise the error is
    logged, kept in ``errors`` and the stream carries on with the next message.
    """

    def __init__(
        self,
        processor: MessageProcessor,
        stream: MessageStream | None = None,
        strict: bool = False,
    ) -> None:
        self.processor = processor
        self.stream = stream or MessageStream(
            repair=processor.settings.repair_json,
            max_depth=processor.settings.max_json_depth,
        )
        self.strict = strict
        self.errors: list[MessageParseError] = []
        self.messages_applied = 0

    def handle_chunk(self, chunk: str) -> list[SurfaceSnapshot | None]:
        """Feed one chunk, apply every message it completed."""
        self.processor.metrics.record_stream_chunk()
        try:
            envelopes = self.stream.feed(chunk)
        except MessageParseError as e:
            return self._recover("chunk", e)
        return self._apply(envelopes)

    def finish(self) -> list[SurfaceSnapshot | None]:
        """End of stream: apply the trailing message, if any."""
        try:
            envelopes = self.stream.flush()
        except MessageParseError as e:
            snapshots = self._recover("flush", e)
        else:
            snapshots = self._apply(envelopes)
        logger.info("stream_complete", applied=self.messages_applied, errors=len(self.errors))
        return snapshots

    def consume(self, chunks: Iterable[str]) -> list[SurfaceSnapshot | None]:
        """Run a whole sync stream through the processor."""
        snapshots: list[SurfaceSnapshot | None] = []

        with self.processor.metrics.measure_duration(_log_duration):
            for chunk in chunks:
                snapshots.extend(self.handle_chunk(chunk))
            snapshots.extend(self.finish())

        return snapshots

    async def aconsume(self, chunks: AsyncIterable[str]) -> list[SurfaceSnapshot | None]:
        """Run a whole async stream through the processor."""
        snapshots: list[SurfaceSnapshot | None] = []

        with self.processor.metrics.measure_duration(_log_duration):
            async for chunk in chunks:
                snapshots.extend(self.handle_chunk(chunk))
            snapshots.extend(self.finish())

        return snapshots

    def _apply(self, envelopes: list[dict]) -> list[SurfaceSnapshot | None]:
        snapshots: list[SurfaceSnapshot | None] = []
        for envelope in envelopes:
            try:
                snapshots.append(self.processor.process_message(envelope))
            except MessageParseError as e:
                self._fail("envelope", e)
                continue
            self.messages_applied += 1
        return snapshots

    def _recover(self, stage: str, error: MessageParseError) -> list[SurfaceSnapshot | None]:
        # Lenient mode still applies the good envelopes queued beside the bad one
        snapshots = [] if self.strict else self._apply(self.stream.drain())
        self._fail(stage, error)
        return snapshots

    def _fail(self, stage: str, error: MessageParseError) -> None:
        self.processor.metrics.record_parse_error("stream")
        if self.strict:
            logger.error("stream_failed", stage=stage, error=str(error))
            raise error
        logger.warning("stream_message_skipped", stage=stage, error=str(error))
        self.errors.append(error)


def _log_duration(duration: float) -> None:
    logger.debug("stream_consumed", duration_ms=duration * 1000)


__all__ = ["StreamHandler"]
