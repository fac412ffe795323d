"""Protocol processor: surfaces, component tables, data models, resolution, dispatch."""

from .components import ComponentNode, ComponentTable, TabNode, TreeNode, build_tree, node_from_entry
from .data_model import DataModel, DataModelView, ModelReader, normalize_path
from .dispatcher import ActionDispatcher, dispatch
from .processor import Listener, MessageProcessor
from .resolver import resolve, resolve_properties
from .surface import Surface, SurfaceRegistry, SurfaceSnapshot

__all__ = [
    # Components
    "ComponentNode",
    "ComponentTable",
    "TabNode",
    "TreeNode",
    "build_tree",
    "node_from_entry",
    # Data model
    "DataModel",
    "DataModelView",
    "ModelReader",
    "normalize_path",
    # Resolution
    "resolve",
    "resolve_properties",
    # Surfaces
    "Surface",
    "SurfaceRegistry",
    "SurfaceSnapshot",
    # Processing
    "MessageProcessor",
    "Listener",
    # Actions
    "ActionDispatcher",
    "dispatch",
]
