"""
Message Processor
Applies protocol messages to surfaces and publishes a snapshot after each one.

The processor is the only writer of surface state. Producer data never makes
it raise once an envelope has parsed: unknown kinds, unknown component types
and unreadable entries are logged as warnings and skipped, and missing ids
or paths simply resolve to ``None`` later.
"""

import time
from typing import Any, Callable, Iterable

from ..core.config import Settings, get_settings
from ..core.json import decode_payload
from ..core.logging_config import LogContext, get_logger
from ..core.validate import MessageParseError
from ..monitoring import MetricsCollector, NullMetrics, metrics_collector
from ..protocol.catalog import is_known
from ..protocol.messages import (
    BeginRendering,
    DataModelUpdate,
    DeleteSurface,
    Message,
    SurfaceUpdate,
    UnknownMessage,
    parse_message,
)
from .components import node_from_entry
from .surface import Surface, SurfaceRegistry, SurfaceSnapshot

logger = get_logger(__name__)

Listener = Callable[[str, SurfaceSnapshot | None], None]


class MessageProcessor:
    """
    Front door of the protocol.

    Messages are applied strictly in arrival order, one at a time. After each
    applied message the affected surface gets a fresh immutable snapshot,
    which is also pushed to subscribers.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        if metrics is None:
            metrics = metrics_collector if self.settings.enable_metrics else NullMetrics()
        self.metrics = metrics
        self.registry = SurfaceRegistry()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, surface_id: str, message: Message | dict[str, Any]) -> SurfaceSnapshot | None:
        """
        Apply one message addressed to ``surface_id``.

        A message that carries no ``surfaceId`` is applied to ``surface_id``;
        one that names a different surface is ignored with a warning.

        Args:
            surface_id: Surface the caller is routing to
            message: Parsed message or decoded envelope

        Returns:
            The surface's snapshot after the message; ``None`` once deleted

        Raises:
            MessageParseError: If a raw envelope is malformed
        """
        parsed = self._parse(message)

        if parsed.surface_id is not None and parsed.surface_id != surface_id:
            self._warn(
                "surface_mismatch",
                surface_id=surface_id,
                message_surface_id=parsed.surface_id,
                kind=parsed.kind,
            )
            return self.current_snapshot(surface_id)

        return self._apply(surface_id, parsed)

    def process_message(self, message: Message | dict[str, Any]) -> SurfaceSnapshot | None:
        """Apply one message to the surface it names (or the default surface)."""
        parsed = self._parse(message)
        return self._apply(parsed.surface_id or self.settings.default_surface_id, parsed)

    def process_messages(
        self, messages: Iterable[Message | dict[str, Any]]
    ) -> list[SurfaceSnapshot | None]:
        """Apply messages in order, returning the snapshot after each one."""
        return [self.process_message(message) for message in messages]

    def process_raw(self, payload: str | bytes) -> list[SurfaceSnapshot | None]:
        """
        Decode a transport payload and apply every message in it.

        The payload may be one message, a JSON array, or JSONL. Every envelope
        is parsed before any is applied, so a malformed payload leaves all
        surfaces untouched.

        Raises:
            MessageParseError: If the payload or any envelope in it is malformed
        """
        try:
            envelopes = decode_payload(
                payload,
                repair=self.settings.repair_json,
                max_bytes=self.settings.max_message_bytes,
                max_depth=self.settings.max_json_depth,
            )
            messages = [parse_message(envelope) for envelope in envelopes]
        except MessageParseError as e:
            logger.error("payload_rejected", error=str(e))
            self.metrics.record_parse_error("payload")
            raise

        return self.process_messages(messages)

    def current_snapshot(self, surface_id: str) -> SurfaceSnapshot | None:
        """Last published snapshot of a surface, ``None`` if absent."""
        return self.registry.snapshot(surface_id)

    def surface_ids(self) -> list[str]:
        """Ids of live surfaces, in creation order."""
        return self.registry.ids()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with ``(surface_id, snapshot)`` after every
        applied message; ``snapshot`` is ``None`` after a delete.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse(self, message: Message | dict[str, Any]) -> Message:
        try:
            return parse_message(message)
        except MessageParseError as e:
            logger.error("message_rejected", error=str(e))
            self.metrics.record_parse_error("message")
            raise

    def _apply(self, surface_id: str, message: Message) -> SurfaceSnapshot | None:
        start_time = time.perf_counter()
        status = "applied"

        with LogContext(surface_id=surface_id, kind=message.kind):
            if isinstance(message, BeginRendering):
                snapshot = self._begin_rendering(surface_id, message)
            elif isinstance(message, SurfaceUpdate):
                snapshot = self._surface_update(surface_id, message)
            elif isinstance(message, DataModelUpdate):
                snapshot = self._data_model_update(surface_id, message)
            elif isinstance(message, DeleteSurface):
                snapshot = self._delete_surface(surface_id)
            else:
                keys = message.keys if isinstance(message, UnknownMessage) else ()
                self._warn("unknown_message_kind", keys=list(keys))
                snapshot = self.current_snapshot(surface_id)
                status = "ignored"

        self.metrics.record_message(message.kind, status, time.perf_counter() - start_time)
        return snapshot

    def _begin_rendering(self, surface_id: str, message: BeginRendering) -> SurfaceSnapshot:
        surface, created = self.registry.get_or_create(surface_id)

        # Re-sent beginRendering keeps existing components (resume semantics)
        if not created and len(surface.components):
            logger.debug("surface_resumed", root=message.root, components=len(surface.components))

        surface.root = message.root
        surface.styles.update(message.styles)
        return self._publish(surface)

    def _surface_update(self, surface_id: str, message: SurfaceUpdate) -> SurfaceSnapshot:
        surface, _ = self.registry.get_or_create(surface_id)

        for entry in message.components:
            node = node_from_entry(entry)
            if node is None:
                self._warn("component_entry_skipped", entry=_describe(entry))
                continue

            if self.settings.warn_unknown_components and not is_known(node.type):
                self._warn("unknown_component_type", id=node.id, type=node.type)

            created = surface.components.upsert(node)
            self.metrics.record_upsert(created)

        return self._publish(surface)

    def _data_model_update(self, surface_id: str, message: DataModelUpdate) -> SurfaceSnapshot:
        surface, _ = self.registry.get_or_create(surface_id)
        written = surface.data_model.merge(message.path, message.contents)
        logger.debug("data_model_merged", path=message.path, written=written)
        return self._publish(surface)

    def _delete_surface(self, surface_id: str) -> None:
        if not self.registry.delete(surface_id):
            logger.debug("delete_unknown_surface")
            return None

        self.metrics.set_active_surfaces(len(self.registry))
        self._notify(surface_id, None)
        return None

    def _publish(self, surface: Surface) -> SurfaceSnapshot:
        snapshot = self.registry.publish(surface)
        self.metrics.set_active_surfaces(len(self.registry))
        self._notify(surface.surface_id, snapshot)
        return snapshot

    def _notify(self, surface_id: str, snapshot: SurfaceSnapshot | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(surface_id, snapshot)
            except Exception:
                # A broken renderer must not stall the stream
                logger.exception("listener_failed", listener=getattr(listener, "__name__", repr(listener)))

    def _warn(self, warning_type: str, **context: Any) -> None:
        logger.warning(warning_type, **context)
        self.metrics.record_warning(warning_type)


def _describe(entry: Any) -> str:
    if isinstance(entry, dict):
        return f"keys={sorted(entry)}"
    return type(entry).__name__


__all__ = ["MessageProcessor", "Listener"]
