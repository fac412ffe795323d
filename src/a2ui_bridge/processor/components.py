"""
Component Table
Flat id-keyed arena of component nodes, plus tree materialization.

Nodes reference each other only by id. ``build_tree`` walks from a root id
and resolves references on the way down; ids that are not in the table
contribute nothing, and an id already open on the current path is not
entered again.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from ..core.logging_config import get_logger
from ..protocol.catalog import ComponentProps, typed_properties

logger = get_logger(__name__)

# Properties holding an ordered list of child ids (or {"explicitList": [...]})
CHILD_LIST_PROPERTIES = ("children",)
# Properties holding a single child id
CHILD_SLOT_PROPERTIES = ("child", "entryPointChild", "contentChild")
# Properties holding records that each carry a "child" id
CHILD_RECORD_PROPERTIES = ("tabItems",)

MAX_TREE_DEPTH = 256

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Deep copy a frozen property value back into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class ComponentNode:
    """One component as last upserted. Immutable; an upsert swaps in a new node."""

    id: str
    type: str
    properties: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    weight: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _freeze(dict(self.properties)))

    @property
    def typed(self) -> ComponentProps:
        """Catalog view of the properties."""
        return typed_properties(self.type, thaw(self.properties))

    def child_ids(self) -> list[str]:
        """Every child id this node references, in discovery order."""
        ids: list[str] = []
        for name in CHILD_LIST_PROPERTIES:
            ids.extend(_id_list(self.properties.get(name)))
        for name in CHILD_SLOT_PROPERTIES:
            child = self.properties.get(name)
            if isinstance(child, str):
                ids.append(child)
        for name in CHILD_RECORD_PROPERTIES:
            for record in _records(self.properties.get(name)):
                if isinstance(record.get("child"), str):
                    ids.append(record["child"])
        return ids

    def to_wire(self) -> dict[str, Any]:
        """Render back to a ``surfaceUpdate`` component entry."""
        entry: dict[str, Any] = {"id": self.id, "component": {self.type: thaw(self.properties)}}
        if self.weight is not None:
            entry["weight"] = self.weight
        return entry


def _id_list(raw: Any) -> list[str]:
    if isinstance(raw, Mapping):
        raw = raw.get("explicitList")
    if isinstance(raw, (list, tuple)):
        return [item for item in raw if isinstance(item, str)]
    return []


def _records(raw: Any) -> list[Mapping[str, Any]]:
    if isinstance(raw, (list, tuple)):
        return [record for record in raw if isinstance(record, Mapping)]
    return []


def node_from_entry(entry: Any) -> ComponentNode | None:
    """
    Read a ``surfaceUpdate`` entry: ``{"id": ..., "component": {"<Type>": {...}}}``.

    Returns ``None`` for entries that cannot be read yet (no id, no type).
    """
    if not isinstance(entry, Mapping):
        return None
    node_id = entry.get("id")
    wrapper = entry.get("component")
    if not isinstance(node_id, str) or not node_id or not isinstance(wrapper, Mapping) or not wrapper:
        return None

    if len(wrapper) > 1:
        logger.warning("component_wrapper_ambiguous", id=node_id, types=list(wrapper))

    type_name, properties = next(iter(wrapper.items()))
    if not isinstance(properties, Mapping):
        properties = {}

    weight = entry.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        weight = None

    return ComponentNode(id=node_id, type=str(type_name), properties=properties, weight=weight)


# ============================================================================
# Tree materialization
# ============================================================================


@dataclass(frozen=True)
class TabNode:
    """A ``tabItems`` record with its child resolved."""

    fields: Mapping[str, Any]
    child: "TreeNode | None"


@dataclass(frozen=True)
class TreeNode:
    """A materialized node with its references resolved to nodes."""

    id: str
    type: str
    properties: Mapping[str, Any]
    children: tuple["TreeNode", ...] = ()
    slots: Mapping[str, "TreeNode"] = field(default_factory=lambda: _EMPTY)
    tabs: tuple[TabNode, ...] = ()
    weight: float | None = None

    @property
    def typed(self) -> ComponentProps:
        """Catalog view of the properties."""
        return typed_properties(self.type, thaw(self.properties))

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first, pre-order iteration over this subtree."""
        yield self
        for child in self.all_children():
            yield from child.walk()

    def all_children(self) -> tuple["TreeNode", ...]:
        """List children, then slot children, then tab children."""
        tab_children = tuple(tab.child for tab in self.tabs if tab.child is not None)
        return self.children + tuple(self.slots.values()) + tab_children

    def to_dict(self) -> dict[str, Any]:
        """Plain nested form, handy for logging and assertions."""
        result: dict[str, Any] = {"id": self.id, "type": self.type, "properties": thaw(self.properties)}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        for name, node in self.slots.items():
            result[name] = node.to_dict()
        if self.tabs:
            result["tabItems"] = [
                {**thaw(tab.fields), "child": tab.child.to_dict() if tab.child else None}
                for tab in self.tabs
            ]
        return result


def build_tree(
    nodes: Mapping[str, ComponentNode], root_id: str | None, max_depth: int = MAX_TREE_DEPTH
) -> TreeNode | None:
    """
    Materialize the tree rooted at ``root_id``.

    Shared ids are expanded once per reference. An id that is already open on
    the current path is skipped, so cycles are cut at the repeating edge.
    Branches deeper than ``max_depth`` are cut as well.
    """
    if not root_id:
        return None
    return _materialize(nodes, root_id, frozenset(), max_depth)


def _materialize(
    nodes: Mapping[str, ComponentNode], node_id: str, ancestors: frozenset[str], budget: int
) -> TreeNode | None:
    node = nodes.get(node_id)
    if node is None:
        return None
    if budget <= 0:
        logger.warning("tree_depth_exceeded", id=node_id)
        return None

    path = ancestors | {node_id}

    def resolve(child_id: str) -> TreeNode | None:
        if child_id in path:
            logger.debug("cycle_detected", parent=node_id, child=child_id)
            return None
        return _materialize(nodes, child_id, path, budget - 1)

    children: list[TreeNode] = []
    for name in CHILD_LIST_PROPERTIES:
        for child_id in _id_list(node.properties.get(name)):
            if (child := resolve(child_id)) is not None:
                children.append(child)

    slots: dict[str, TreeNode] = {}
    for name in CHILD_SLOT_PROPERTIES:
        child_id = node.properties.get(name)
        if isinstance(child_id, str) and (child := resolve(child_id)) is not None:
            slots[name] = child

    tabs: list[TabNode] = []
    for name in CHILD_RECORD_PROPERTIES:
        for record in _records(node.properties.get(name)):
            child_id = record.get("child")
            child = resolve(child_id) if isinstance(child_id, str) else None
            fields = MappingProxyType({k: v for k, v in record.items() if k != "child"})
            tabs.append(TabNode(fields=fields, child=child))

    return TreeNode(
        id=node.id,
        type=node.type,
        properties=node.properties,
        children=tuple(children),
        slots=MappingProxyType(slots),
        tabs=tuple(tabs),
        weight=node.weight,
    )


class ComponentTable:
    """Mutable id → node arena owned by a single surface."""

    def __init__(self) -> None:
        self._nodes: dict[str, ComponentNode] = {}

    def upsert(self, node: ComponentNode) -> bool:
        """
        Insert or replace a node by id.

        Returns:
            True if the id was new
        """
        created = node.id not in self._nodes
        self._nodes[node.id] = node
        return created

    def get(self, node_id: str) -> ComponentNode | None:
        return self._nodes.get(node_id)

    def remove(self, node_id: str) -> bool:
        return self._nodes.pop(node_id, None) is not None

    def ids(self) -> list[str]:
        return list(self._nodes)

    def build_tree(self, root_id: str | None) -> TreeNode | None:
        """Materialize the current tree from ``root_id``."""
        return build_tree(self._nodes, root_id)

    def freeze(self) -> Mapping[str, ComponentNode]:
        """Immutable copy for a snapshot. Nodes are shared, they never change."""
        return MappingProxyType(dict(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[ComponentNode]:
        return iter(self._nodes.values())


__all__ = [
    "ComponentNode",
    "ComponentTable",
    "TreeNode",
    "TabNode",
    "build_tree",
    "node_from_entry",
    "thaw",
    "CHILD_LIST_PROPERTIES",
    "CHILD_SLOT_PROPERTIES",
    "CHILD_RECORD_PROPERTIES",
]
