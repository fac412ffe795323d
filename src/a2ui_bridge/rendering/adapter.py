"""
Renderer Adapter
Connects any widget toolkit to processed surfaces.

A renderer registers one callable per component type in a
:class:`ComponentMapping`. :func:`render_tree` walks a snapshot's tree
bottom-up and calls each one with the node and an :class:`AdapterContext`
that carries the pre-rendered children and the action callback.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, TypeVar

from ..core.logging_config import get_logger
from ..processor.components import TreeNode, thaw
from ..processor.data_model import ModelReader
from ..processor.dispatcher import dispatch
from ..processor.resolver import resolve, resolve_properties
from ..processor.surface import SurfaceSnapshot
from ..protocol.actions import Action, UserAction
from ..protocol.values import LITERAL_KEYS, Scalar

logger = get_logger(__name__)

FALLBACK_KEY = "__fallback__"

ActionCallback = Callable[[UserAction], None]
RenderFn = Callable[[TreeNode, "AdapterContext"], Any]

V = TypeVar("V", bound=str)


@dataclass(frozen=True)
class AdapterContext:
    """Everything a render callable needs besides the node itself."""

    surface_id: str
    component_id: str
    on_action: ActionCallback
    model: ModelReader
    mapping: "ComponentMapping"
    children: tuple = ()
    slots: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    tabs: tuple = ()

    def resolve(self, value: Any) -> Scalar | None:
        """Resolve a DataValue against the surface's data model."""
        return resolve(value, self.model)


class ComponentMapping:
    """
    Registry of render callables keyed by component type.

    A ``__fallback__`` entry renders every type that has no callable of its
    own.
    """

    def __init__(
        self,
        adapters: Mapping[str, RenderFn] | None = None,
        fallback: RenderFn | None = None,
    ) -> None:
        self.adapters: dict[str, RenderFn] = {}
        self.fallback: RenderFn | None = fallback

        for type_name, render in (adapters or {}).items():
            if type_name == FALLBACK_KEY:
                self.fallback = render
            else:
                self.register(type_name, render)

        if self.fallback is None:
            logger.debug("mapping_without_fallback", types=len(self.adapters))

    def register(self, type_name: str, render: RenderFn) -> None:
        """Register or replace the callable for a type."""
        if type_name in self.adapters:
            logger.debug("adapter_replaced", type=type_name)
        self.adapters[type_name] = render

    def get(self, type_name: str) -> RenderFn | None:
        """Callable for a type, the fallback, or ``None``."""
        return self.adapters.get(type_name, self.fallback)

    def types(self) -> list[str]:
        """Types with a callable of their own."""
        return list(self.adapters)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self.adapters

    def __len__(self) -> int:
        return len(self.adapters)


def render_tree(
    snapshot: SurfaceSnapshot | None,
    mapping: ComponentMapping,
    on_action: ActionCallback,
) -> Any:
    """
    Render a snapshot's tree with the given mapping.

    Children are rendered before their parent. A node whose type has no
    callable (and no fallback) renders as ``None`` and is dropped from its
    parent's children.

    Args:
        snapshot: Snapshot to render
        mapping: Type to render-callable registry
        on_action: Receives user actions raised by rendered widgets

    Returns:
        Whatever the root callable returned, ``None`` without a tree
    """
    if snapshot is None or snapshot.tree is None:
        return None
    return _render_node(snapshot.tree, snapshot, mapping, on_action)


def _render_node(
    node: TreeNode,
    snapshot: SurfaceSnapshot,
    mapping: ComponentMapping,
    on_action: ActionCallback,
) -> Any:
    render = mapping.get(node.type)
    if render is None:
        logger.warning("component_not_rendered", surface_id=snapshot.surface_id, id=node.id, type=node.type)
        return None

    children = tuple(
        rendered
        for rendered in (_render_node(child, snapshot, mapping, on_action) for child in node.children)
        if rendered is not None
    )
    slots = {name: _render_node(child, snapshot, mapping, on_action) for name, child in node.slots.items()}
    tabs = tuple(
        (thaw(tab.fields), _render_node(tab.child, snapshot, mapping, on_action) if tab.child else None)
        for tab in node.tabs
    )

    context = AdapterContext(
        surface_id=snapshot.surface_id,
        component_id=node.id,
        on_action=on_action,
        model=snapshot.data_model,
        mapping=mapping,
        children=children,
        slots=MappingProxyType(slots),
        tabs=tabs,
    )
    return render(node, context)


def create_action_handler(
    action: Any,
    context: AdapterContext,
    additional_context: Mapping[str, Scalar] | None = None,
) -> Callable[[], UserAction | None] | None:
    """
    Build a zero-argument callback for a widget's click/submit handler.

    The context bindings are resolved when the callback runs, not when it is
    created.

    Returns:
        The callback, or ``None`` when ``action`` is not a named action
    """
    if Action.from_property(thaw(action)) is None:
        return None

    def handler() -> UserAction | None:
        user_action = dispatch(action, context.component_id, context.model, additional_context)
        if user_action is not None:
            context.on_action(user_action)
        return user_action

    return handler


def resolved_properties(node: TreeNode, context: AdapterContext) -> dict[str, Any]:
    """Node properties with every DataValue replaced by its current literal."""
    return resolve_properties(thaw(node.properties), context.model)


def extract_value(value: Any) -> Any:
    """
    Literal carried by a wire value, without a model.

    Non-objects come back unchanged; a path object comes back as is.
    """
    if value is None or not isinstance(value, Mapping):
        return value
    for key in LITERAL_KEYS + ("literalDate",):
        if key in value:
            return value[key]
    return value


def map_variant(variant: str | None, variant_map: Mapping[str, V], default: V) -> V:
    """Translate a protocol variant name into a toolkit's variant."""
    if not variant:
        return default
    return variant_map.get(variant, default)


def surface_style_vars(styles: Mapping[str, Any]) -> dict[str, str]:
    """
    CSS custom properties for a surface's ``styles``.

    Examples:
        >>> surface_style_vars({"primaryColor": "#3366ff"})
        {'--a2ui-primary': '#3366ff', '--a2ui-primary-50': '#3366ff'}
    """
    css: dict[str, str] = {}
    for key, value in styles.items():
        if value is None:
            continue
        value = str(value)
        if key == "font":
            css["--a2ui-font-family"] = value
            css["fontFamily"] = value
        elif key == "primaryColor":
            css["--a2ui-primary"] = value
            css["--a2ui-primary-50"] = value
        else:
            css[f"--a2ui-{key}"] = value
    return css


__all__ = [
    "FALLBACK_KEY",
    "AdapterContext",
    "ComponentMapping",
    "RenderFn",
    "render_tree",
    "create_action_handler",
    "resolved_properties",
    "extract_value",
    "map_variant",
    "surface_style_vars",
]
