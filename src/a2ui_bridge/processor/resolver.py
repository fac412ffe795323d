"""Value Resolver: turns DataValues into literals against a data model.

Pure functions. Nothing is cached; call again after every model change.
"""

from typing import Any, Mapping

from ..protocol.values import DataValue, LiteralValue, PathValue, Scalar, is_data_value, parse_data_value
from .data_model import ModelReader


def resolve(value: DataValue | Mapping[str, Any] | Scalar | None, model: ModelReader) -> Scalar | None:
    """
    Resolve a value against a model.

    Args:
        value: A parsed DataValue or its raw wire object
        model: Store or snapshot view to read paths from

    Returns:
        The literal, or ``None`` when the path was never written or the value
        carries neither a literal nor a path

    Examples:
        >>> from a2ui_bridge.processor.data_model import DataModel
        >>> resolve({"literalString": "x"}, DataModel())
        'x'
        >>> resolve(PathValue("missing"), DataModel()) is None
        True
    """
    parsed = parse_data_value(value)
    if isinstance(parsed, LiteralValue):
        return parsed.value
    if isinstance(parsed, PathValue):
        return model.read(parsed.path)
    return None


def resolve_properties(properties: Mapping[str, Any], model: ModelReader) -> dict[str, Any]:
    """
    Resolve every DataValue-shaped entry of a property bag.

    Nested records and lists are walked; anything that is not a DataValue
    (child ids, actions, hints given as plain strings) is copied through.
    An action's context is left alone: it is resolved at dispatch time.
    """
    return {name: _resolve_any(name, value, model) for name, value in properties.items()}


def _resolve_any(name: str, value: Any, model: ModelReader) -> Any:
    if name == "action" or (name.startswith("on") and name[2:3].isupper()):
        return _plain(value)
    if is_data_value(value):
        return resolve(value, model)
    if isinstance(value, Mapping):
        return {k: _resolve_any(k, v, model) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_resolve_any(name, item, model) for item in value]
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


__all__ = ["resolve", "resolve_properties"]
