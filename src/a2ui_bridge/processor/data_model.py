"""
Data Model Store
Per-surface, path-addressable store of literal values.

Keys are full dotted paths (``form.firstName``); writing one key never touches
another, including its siblings under the same prefix.
"""

from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Protocol

from ..core.logging_config import get_logger
from ..protocol.values import ENTRY_VALUE_KEYS, LiteralValue, Scalar, parse_data_value

logger = get_logger(__name__)


class ModelReader(Protocol):
    """Anything that can read a dotted path: a store or a snapshot's view of one."""

    def read(self, path: str) -> Scalar | None:
        ...


def normalize_path(path: str | None) -> str:
    """
    Normalize a data-model path to dotted form.

    ``""`` and ``"/"`` mean the root. Slash-separated paths are accepted.

    Examples:
        >>> normalize_path("/form/name")
        'form.name'
        >>> normalize_path("/")
        ''
    """
    if not path:
        return ""
    segments = [segment for segment in path.replace("/", ".").split(".") if segment]
    return ".".join(segments)


def join_path(prefix: str | None, key: str) -> str:
    """Join a key under a prefix, both normalized."""
    prefix = normalize_path(prefix)
    key = normalize_path(key)
    if not prefix:
        return key
    if not key:
        return prefix
    return f"{prefix}.{key}"


def flatten_entries(prefix: str, entries: Iterable[Any]) -> Iterator[tuple[str, Scalar]]:
    """
    Flatten ``dataModelUpdate`` contents into ``(full_key, literal)`` pairs.

    Accepted entry shapes:
        ``{"key": k, "value": <DataValue>}``
        ``{"key": k, "valueString" | "valueNumber" | "valueBoolean": v}``
        ``{"key": k, "valueMap": [<entry>, ...]}``  (nested under ``k``)

    Entries without a key or a literal value are skipped.
    """
    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.warning("data_entry_skipped", reason="not_an_object")
            continue
        key = entry.get("key")
        if not isinstance(key, str) or not normalize_path(key):
            logger.warning("data_entry_skipped", reason="missing_key")
            continue

        full_key = join_path(prefix, key)

        if isinstance(entry.get("valueMap"), list):
            yield from flatten_entries(full_key, entry["valueMap"])
            continue

        if "value" in entry:
            value = parse_data_value(entry["value"])
        else:
            value = parse_data_value({k: entry[k] for k in ENTRY_VALUE_KEYS if k in entry})

        # A path can't be stored; the model only holds literals
        if not isinstance(value, LiteralValue):
            logger.warning("data_entry_skipped", key=full_key, reason="no_literal_value")
            continue

        yield full_key, value.value


class DataModel:
    """Mutable store owned by a single surface. Only the processor writes to it."""

    def __init__(self, values: Mapping[str, Scalar] | None = None) -> None:
        self._values: dict[str, Scalar] = dict(values or {})

    def merge(self, path: str | None, entries: Iterable[Any]) -> int:
        """
        Merge entries under an optional path prefix. Last write wins per key.

        Args:
            path: Prefix for every entry key (``""``/``"/"`` for root)
            entries: Raw ``dataModelUpdate`` contents

        Returns:
            Number of keys written
        """
        written = 0
        for key, value in flatten_entries(normalize_path(path), entries):
            self._values[key] = value
            written += 1
        return written

    def set(self, key: str, value: Scalar) -> None:
        """Point write of one literal."""
        self._values[normalize_path(key)] = value

    def read(self, path: str) -> Scalar | None:
        """Read a full dotted key; ``None`` if never written."""
        return self._values.get(normalize_path(path))

    def to_dict(self) -> dict[str, Scalar]:
        """Copy of all key/value pairs."""
        return dict(self._values)

    def freeze(self) -> "DataModelView":
        """Immutable copy for a snapshot."""
        return DataModelView(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._values


class DataModelView(Mapping[str, Scalar]):
    """Read-only data model captured in a snapshot."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Scalar]) -> None:
        self._values = MappingProxyType(dict(values))

    def read(self, path: str) -> Scalar | None:
        """Read a full dotted key; ``None`` if never written."""
        return self._values.get(normalize_path(path))

    def __getitem__(self, key: str) -> Scalar:
        return self._values[normalize_path(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"DataModelView({dict(self._values)!r})"


__all__ = [
    "ModelReader",
    "DataModel",
    "DataModelView",
    "normalize_path",
    "join_path",
    "flatten_entries",
]
