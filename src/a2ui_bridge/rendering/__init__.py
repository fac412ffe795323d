"""Helpers for renderers that turn snapshots into widgets."""

from .adapter import (
    FALLBACK_KEY,
    AdapterContext,
    ComponentMapping,
    create_action_handler,
    extract_value,
    map_variant,
    render_tree,
    resolved_properties,
    surface_style_vars,
)

__all__ = [
    "FALLBACK_KEY",
    "AdapterContext",
    "ComponentMapping",
    "render_tree",
    "create_action_handler",
    "resolved_properties",
    "extract_value",
    "map_variant",
    "surface_style_vars",
]
