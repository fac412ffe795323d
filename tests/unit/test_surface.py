"""Surface registry and snapshot tests."""

import pytest

from a2ui_bridge.processor.components import ComponentNode
from a2ui_bridge.processor.surface import SurfaceRegistry


@pytest.mark.unit
def test_get_or_create():
    """Test surfaces are created on first reference."""
    registry = SurfaceRegistry()
    surface, created = registry.get_or_create("main")
    again, created_again = registry.get_or_create("main")

    assert created is True
    assert created_again is False
    assert again is surface
    assert "main" in registry
    assert len(registry) == 1


@pytest.mark.unit
def test_publish_and_snapshot():
    """Test publishing stores a versioned snapshot."""
    registry = SurfaceRegistry()
    surface, _ = registry.get_or_create("main")
    assert registry.snapshot("main") is None

    first = registry.publish(surface)
    surface.components.upsert(ComponentNode(id="x", type="Text"))
    second = registry.publish(surface)

    assert (first.version, second.version) == (1, 2)
    assert registry.snapshot("main") is second
    assert list(first.components) == []
    assert list(second.components) == ["x"]


@pytest.mark.unit
def test_snapshot_immutable():
    """Test snapshots can't be changed."""
    registry = SurfaceRegistry()
    surface, _ = registry.get_or_create("main")
    surface.styles["font"] = "Inter"
    snapshot = registry.publish(surface)

    with pytest.raises(TypeError):
        snapshot.styles["font"] = "Other"  # type: ignore[index]
    with pytest.raises(TypeError):
        snapshot.components["y"] = None  # type: ignore[index]
    with pytest.raises(AttributeError):
        snapshot.root = "changed"  # type: ignore[misc]


@pytest.mark.unit
def test_delete():
    """Test deletion drops the surface and its snapshot."""
    registry = SurfaceRegistry()
    surface, _ = registry.get_or_create("main")
    registry.publish(surface)

    assert registry.delete("main") is True
    assert registry.delete("main") is False
    assert registry.snapshot("main") is None
    assert registry.ids() == []


@pytest.mark.unit
def test_snapshot_tree_cached():
    """Test the tree is built once per snapshot."""
    registry = SurfaceRegistry()
    surface, _ = registry.get_or_create("main")
    surface.root = "x"
    surface.components.upsert(ComponentNode(id="x", type="Text"))
    snapshot = registry.publish(surface)

    assert snapshot.tree is snapshot.tree
    assert snapshot.tree.id == "x"
