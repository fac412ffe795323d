"""
Surface Registry
Owns every live surface and the last snapshot published for each.
"""

from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any, Mapping

from ..core.hash import fingerprint
from ..core.logging_config import get_logger
from ..protocol.values import Scalar
from .components import ComponentNode, ComponentTable, TreeNode, build_tree, thaw
from .data_model import DataModel, DataModelView
from .resolver import resolve

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class SurfaceSnapshot:
    """
    Immutable view of a surface after a fully applied message.

    Later messages never change a snapshot; they publish a new one.
    """

    surface_id: str
    root: str | None
    components: Mapping[str, ComponentNode]
    data_model: DataModelView
    styles: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    version: int = 0

    @cached_property
    def tree(self) -> TreeNode | None:
        """Materialized tree from ``root``; ``None`` without a root or root node."""
        return build_tree(self.components, self.root)

    @cached_property
    def fingerprint(self) -> str:
        """Content hash; equal for snapshots with equal content."""
        return fingerprint(self.to_dict())

    def read(self, path: str) -> Scalar | None:
        """Read the data model at ``path``."""
        return self.data_model.read(path)

    def resolve(self, value: Any) -> Scalar | None:
        """Resolve a DataValue against this snapshot's data model."""
        return resolve(value, self.data_model)

    def to_dict(self) -> dict[str, Any]:
        """Plain form (no version), suitable for JSON."""
        return {
            "surfaceId": self.surface_id,
            "root": self.root,
            "components": {node_id: node.to_wire() for node_id, node in self.components.items()},
            "dataModel": dict(self.data_model),
            "styles": thaw(self.styles),
        }


class Surface:
    """Mutable state of one surface. Only the message processor touches it."""

    def __init__(self, surface_id: str) -> None:
        self.surface_id = surface_id
        self.root: str | None = None
        self.components = ComponentTable()
        self.data_model = DataModel()
        self.styles: dict[str, Any] = {}
        self.version = 0

    def snapshot(self) -> SurfaceSnapshot:
        """Capture the current state."""
        return SurfaceSnapshot(
            surface_id=self.surface_id,
            root=self.root,
            components=self.components.freeze(),
            data_model=self.data_model.freeze(),
            styles=MappingProxyType(dict(self.styles)),
            version=self.version,
        )

    def __repr__(self) -> str:
        return (
            f"Surface(id={self.surface_id!r}, root={self.root!r}, "
            f"components={len(self.components)}, keys={len(self.data_model)})"
        )


class SurfaceRegistry:
    """
    Registry of live surfaces.

    Surfaces are isolated: nothing in one can reference another.
    """

    def __init__(self) -> None:
        self._surfaces: dict[str, Surface] = {}
        self._snapshots: dict[str, SurfaceSnapshot] = {}

    def get(self, surface_id: str) -> Surface | None:
        """Get surface by id"""
        return self._surfaces.get(surface_id)

    def get_or_create(self, surface_id: str) -> tuple[Surface, bool]:
        """
        Get a surface, creating an empty one on first reference.

        Returns:
            (surface, created)
        """
        surface = self._surfaces.get(surface_id)
        if surface is not None:
            return surface, False

        surface = Surface(surface_id)
        self._surfaces[surface_id] = surface
        logger.info("surface_created", surface_id=surface_id)
        return surface, True

    def delete(self, surface_id: str) -> bool:
        """
        Remove a surface and its published snapshot.

        Returns:
            True if the surface existed
        """
        self._snapshots.pop(surface_id, None)
        if self._surfaces.pop(surface_id, None) is None:
            return False
        logger.info("surface_deleted", surface_id=surface_id)
        return True

    def publish(self, surface: Surface) -> SurfaceSnapshot:
        """Take and store a new snapshot of ``surface``."""
        surface.version += 1
        snapshot = surface.snapshot()
        self._snapshots[surface.surface_id] = snapshot
        return snapshot

    def snapshot(self, surface_id: str) -> SurfaceSnapshot | None:
        """Last published snapshot, or ``None`` for unknown/deleted surfaces."""
        return self._snapshots.get(surface_id)

    def ids(self) -> list[str]:
        return list(self._surfaces)

    def __len__(self) -> int:
        return len(self._surfaces)

    def __contains__(self, surface_id: object) -> bool:
        return surface_id in self._surfaces


__all__ = ["Surface", "SurfaceSnapshot", "SurfaceRegistry"]
