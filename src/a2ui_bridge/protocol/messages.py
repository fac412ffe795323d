"""Wire messages: a tagged union keyed by which envelope field is present."""

from typing import Any, ClassVar, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from returns.result import Result, Success, Failure

from ..core.logging_config import get_logger
from ..core.validate import MessageParseError, ParseFailure

logger = get_logger(__name__)


class WireModel(BaseModel):
    """Base for wire models: camelCase aliases, immutable, tolerant of new fields."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    kind: ClassVar[str] = ""
    surface_id: str | None = Field(default=None, alias="surfaceId")

    def to_wire(self) -> dict[str, Any]:
        """Render back to a wire envelope."""
        return {self.kind: self.model_dump(by_alias=True, exclude_none=True)}


class BeginRendering(WireModel):
    """Signals the renderer to start drawing a surface from ``root``."""

    kind: ClassVar[str] = "beginRendering"
    root: str
    styles: dict[str, Any] = Field(default_factory=dict)


class SurfaceUpdate(WireModel):
    """Upserts components by id.

    Entries stay raw here; each one is read separately so that a single
    half-written entry from a streaming producer does not sink the rest.
    """

    kind: ClassVar[str] = "surfaceUpdate"
    components: list[Any] = Field(default_factory=list)


class DataModelUpdate(WireModel):
    """Merges entries into the data model under ``path``."""

    kind: ClassVar[str] = "dataModelUpdate"
    path: str = ""
    contents: list[Any] = Field(default_factory=list)


class DeleteSurface(WireModel):
    """Removes a surface and all its state."""

    kind: ClassVar[str] = "deleteSurface"


class UnknownMessage(WireModel):
    """A well-formed envelope of a kind this processor does not understand."""

    kind: ClassVar[str] = "unknown"
    keys: tuple[str, ...] = ()

    def to_wire(self) -> dict[str, Any]:
        return {}


Message = Union[BeginRendering, SurfaceUpdate, DataModelUpdate, DeleteSurface, UnknownMessage]

MESSAGE_TYPES: dict[str, type[WireModel]] = {
    model.kind: model for model in (BeginRendering, SurfaceUpdate, DataModelUpdate, DeleteSurface)
}


def parse_message(envelope: Any) -> Message:
    """
    Parse one decoded envelope into a typed message.

    Args:
        envelope: Decoded JSON object

    Returns:
        Typed message; ``UnknownMessage`` when no known kind is present

    Raises:
        MessageParseError: If the envelope is not an object, names more than
            one known kind, or its body is structurally invalid
    """
    if isinstance(envelope, WireModel):
        return envelope  # type: ignore[return-value]

    if not isinstance(envelope, Mapping):
        raise MessageParseError(f"Expected message object, got {type(envelope).__name__}")

    kinds = [key for key in envelope if key in MESSAGE_TYPES]
    if len(kinds) > 1:
        raise MessageParseError(f"Message names more than one kind: {', '.join(kinds)}")

    if not kinds:
        return UnknownMessage(keys=tuple(str(key) for key in envelope))

    kind = kinds[0]
    body = envelope[kind]
    if not isinstance(body, Mapping):
        raise MessageParseError(f"'{kind}' body must be an object, got {type(body).__name__}")

    try:
        return MESSAGE_TYPES[kind].model_validate(body)  # type: ignore[return-value]
    except ValidationError as e:
        logger.debug("message_invalid", kind=kind, errors=e.error_count())
        raise MessageParseError(f"Invalid '{kind}' message: {e}", e) from e


def try_parse_message(envelope: Any) -> Result[Message, ParseFailure]:
    """
    Parse an envelope (Result pattern version).

    Returns:
        Success with the message, or Failure describing why it was dropped
    """
    try:
        return Success(parse_message(envelope))
    except MessageParseError as e:
        return Failure(ParseFailure(str(e)))


__all__ = [
    "WireModel",
    "BeginRendering",
    "SurfaceUpdate",
    "DataModelUpdate",
    "DeleteSurface",
    "UnknownMessage",
    "Message",
    "MESSAGE_TYPES",
    "parse_message",
    "try_parse_message",
]
