"""Data values: a literal or a path into the surface's data model.

On the wire a value is an object with one of ``literalString``,
``literalNumber``, ``literalBoolean`` or ``path``. In Python it is an explicit
tagged union of :class:`LiteralValue` and :class:`PathValue` so that the
"not resolvable" branch is always visible at the call site.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[str, int, float, bool]

# Checked in order; the first key present wins.
LITERAL_KEYS = ("literalString", "literalNumber", "literalBoolean", "literalBool")
# dataModelUpdate entries carry their value inline under these keys.
ENTRY_VALUE_KEYS = ("valueString", "valueNumber", "valueBoolean")
PATH_KEY = "path"


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """A literal string, number or boolean."""

    value: Scalar


@dataclass(frozen=True, slots=True)
class PathValue:
    """A dotted pointer into the owning surface's data model."""

    path: str


DataValue = Union[LiteralValue, PathValue]


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def parse_data_value(raw: Any) -> DataValue | None:
    """
    Read a wire value into a DataValue.

    Bare JSON scalars are accepted as literals. Anything else that carries
    neither a literal nor a path returns ``None``.

    Examples:
        >>> parse_data_value({"literalString": "Hello"})
        LiteralValue(value='Hello')
        >>> parse_data_value({"path": "form.name"})
        PathValue(path='form.name')
    """
    if isinstance(raw, (LiteralValue, PathValue)):
        return raw
    if _is_scalar(raw):
        return LiteralValue(raw)
    if not isinstance(raw, Mapping):
        return None

    for key in LITERAL_KEYS + ENTRY_VALUE_KEYS:
        if key in raw and _is_scalar(raw[key]):
            return LiteralValue(raw[key])

    path = raw.get(PATH_KEY)
    if isinstance(path, str):
        return PathValue(path)
    return None


def is_data_value(raw: Any) -> bool:
    """True if ``raw`` is a wire object shaped like a DataValue."""
    if not isinstance(raw, Mapping) or not raw:
        return False
    keys = set(raw)
    return bool(keys & set(LITERAL_KEYS)) or (keys == {PATH_KEY} and isinstance(raw[PATH_KEY], str))


def to_wire(value: DataValue) -> dict[str, Any]:
    """Render a DataValue back to its wire object."""
    if isinstance(value, PathValue):
        return {PATH_KEY: value.path}
    literal = value.value
    if isinstance(literal, bool):
        return {"literalBoolean": literal}
    if isinstance(literal, (int, float)):
        return {"literalNumber": literal}
    return {"literalString": literal}


class BoundValue(BaseModel):
    """Pydantic view of a wire DataValue, used inside typed component properties."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    literal_string: str | None = Field(default=None, alias="literalString")
    literal_number: int | float | None = Field(default=None, alias="literalNumber")
    literal_boolean: bool | None = Field(default=None, alias="literalBoolean")
    path: str | None = None

    def to_data_value(self) -> DataValue | None:
        """Convert to the tagged union."""
        return parse_data_value(self.model_dump(by_alias=True, exclude_none=True))


__all__ = [
    "Scalar",
    "LiteralValue",
    "PathValue",
    "DataValue",
    "BoundValue",
    "parse_data_value",
    "is_data_value",
    "to_wire",
]
