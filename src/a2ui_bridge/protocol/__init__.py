"""Wire protocol: values, messages, actions and the component catalog."""

from .actions import Action, ActionContextEntry, UserAction
from .catalog import CATALOG, ComponentProps, OpaqueProperties, is_known, register_component, typed_properties
from .messages import (
    BeginRendering,
    DataModelUpdate,
    DeleteSurface,
    Message,
    SurfaceUpdate,
    UnknownMessage,
    parse_message,
    try_parse_message,
)
from .values import BoundValue, DataValue, LiteralValue, PathValue, parse_data_value

__all__ = [
    # Values
    "DataValue",
    "LiteralValue",
    "PathValue",
    "BoundValue",
    "parse_data_value",
    # Messages
    "Message",
    "BeginRendering",
    "SurfaceUpdate",
    "DataModelUpdate",
    "DeleteSurface",
    "UnknownMessage",
    "parse_message",
    "try_parse_message",
    # Actions
    "Action",
    "ActionContextEntry",
    "UserAction",
    # Catalog
    "CATALOG",
    "ComponentProps",
    "OpaqueProperties",
    "is_known",
    "register_component",
    "typed_properties",
]
