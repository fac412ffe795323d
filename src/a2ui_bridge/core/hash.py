"""Fast, non-cryptographic fingerprints for snapshot change detection."""

from typing import Any

import orjson
import xxhash


def hash_bytes(data: bytes) -> str:
    """Hash bytes to an xxhash64 hex digest."""
    return xxhash.xxh64(data).hexdigest()


def fingerprint(obj: Any) -> str:
    """
    Fingerprint a JSON-compatible value.

    Keys are sorted so equal content always yields an equal digest.

    Examples:
        >>> fingerprint({"b": 1, "a": 2}) == fingerprint({"a": 2, "b": 1})
        True
    """
    return hash_bytes(orjson.dumps(obj, option=orjson.OPT_SORT_KEYS, default=_default))


def _default(obj: Any) -> Any:
    # Mapping proxies and tuples show up in snapshots
    if hasattr(obj, "items"):
        return dict(obj.items())
    if isinstance(obj, (tuple, set, frozenset)):
        return list(obj)
    raise TypeError(f"Cannot fingerprint {type(obj).__name__}")


__all__ = [
    "hash_bytes",
    "fingerprint",
]
