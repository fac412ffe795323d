"""
Action Dispatcher
Packages a user interaction and its resolved context into an outbound envelope.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from ..core.logging_config import get_logger
from ..monitoring import MetricsCollector, metrics_collector
from ..protocol.actions import Action, UserAction
from ..protocol.values import Scalar
from .components import thaw
from .data_model import ModelReader
from .resolver import resolve

logger = get_logger(__name__)

ActionSink = Callable[[UserAction], None]


def timestamp_now() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def dispatch(
    action: Action | Mapping[str, Any] | None,
    source_component_id: str,
    model: ModelReader,
    additional_context: Mapping[str, Scalar] | None = None,
) -> UserAction | None:
    """
    Build the outbound envelope for an interaction.

    Every context binding is resolved against ``model`` now, so values the
    user just typed are the ones sent. Keys whose binding resolves to nothing
    are left out.

    Args:
        action: The component's ``action`` property (parsed or raw)
        source_component_id: Id of the component the user interacted with
        model: Data model to resolve context paths against
        additional_context: Extra literals supplied by the renderer

    Returns:
        The envelope, or ``None`` when the component has no usable action
    """
    if isinstance(action, Mapping):
        action = thaw(action)
    parsed = Action.from_property(action)
    if parsed is None:
        return None

    context: dict[str, Scalar] = dict(additional_context or {})
    for entry in parsed.context:
        value = resolve(entry.value, model)
        if value is None:
            logger.debug("action_context_unresolved", action=parsed.name, key=entry.key)
            continue
        context[entry.key] = value

    return UserAction(
        action_name=parsed.name,
        source_component_id=source_component_id,
        timestamp=timestamp_now(),
        context=context or None,
    )


class ActionDispatcher:
    """
    Dispatches actions to a sink (the transport back to the producer).

    Holds no surface state; the model is passed on every call.
    """

    def __init__(self, sink: ActionSink, metrics: MetricsCollector | None = None) -> None:
        self.sink = sink
        self.metrics = metrics or metrics_collector

    def dispatch(
        self,
        action: Action | Mapping[str, Any] | None,
        source_component_id: str,
        model: ModelReader,
        additional_context: Mapping[str, Scalar] | None = None,
    ) -> UserAction | None:
        """Build the envelope and hand it to the sink. No-op without an action."""
        user_action = dispatch(action, source_component_id, model, additional_context)
        if user_action is None:
            self.metrics.record_action("skipped")
            return None

        logger.info(
            "action_dispatched",
            action=user_action.action_name,
            source=source_component_id,
            context_keys=sorted(user_action.context or {}),
        )
        self.sink(user_action)
        self.metrics.record_action("sent")
        return user_action


__all__ = ["ActionDispatcher", "ActionSink", "dispatch", "timestamp_now"]
