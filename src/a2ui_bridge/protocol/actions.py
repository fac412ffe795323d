"""Inbound action descriptions and the outbound user-action envelope."""

from typing import Annotated, Any, Mapping

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from ..core.json import encode_json
from ..core.logging_config import get_logger
from .values import Scalar

logger = get_logger(__name__)


class ActionContextEntry(BaseModel):
    """One ``{key, value}`` binding resolved at dispatch time."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    value: Any = None


def _context_entries(raw: Any) -> Any:
    # Unreadable bindings are dropped one at a time
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        logger.warning("action_context_skipped", context_type=type(raw).__name__)
        return []

    entries = []
    for index, entry in enumerate(raw):
        if isinstance(entry, ActionContextEntry):
            entries.append(entry)
        elif isinstance(entry, Mapping) and isinstance(entry.get("key"), str):
            entries.append(entry)
        else:
            logger.warning("action_context_entry_skipped", index=index, entry=repr(entry)[:80])
    return entries


ActionContext = Annotated[list[ActionContextEntry], BeforeValidator(_context_entries)]


class Action(BaseModel):
    """An intent attached to an interactive component."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    context: ActionContext = Field(default_factory=list)

    @classmethod
    def from_property(cls, raw: Any) -> "Action | None":
        """
        Read an ``action`` property from a component's property bag.

        Returns ``None`` for anything that is not a named action, which is
        the normal case for decorative or still-streaming components.
        """
        if isinstance(raw, Action):
            return raw
        if not isinstance(raw, Mapping):
            return None
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return None


class UserAction(BaseModel):
    """Outbound envelope sent to the producer. Context holds resolved literals only."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    action_name: str = Field(alias="actionName")
    source_component_id: str = Field(alias="sourceComponentId")
    timestamp: str
    context: dict[str, Scalar] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Render the producer-facing envelope."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> bytes:
        """Serialize the producer-facing envelope."""
        return encode_json(self.to_wire())


__all__ = ["ActionContextEntry", "Action", "UserAction"]
