"""
Component Catalog
Typed property models for the standard component types, keyed by type name.

Nodes keep their raw property bag; this catalog gives renderers a validated,
attribute-style view of it. Types outside the catalog, and known types whose
properties do not validate yet (common mid-stream), fall back to
:class:`OpaqueProperties`, which keeps every field as-is.
"""

from typing import Annotated, Any, Callable, Mapping

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..core.logging_config import get_logger
from .actions import Action
from .values import BoundValue, LITERAL_KEYS

logger = get_logger(__name__)


def _coerce_bound(raw: Any) -> Any:
    # Producers sometimes skip the literal wrapper
    if isinstance(raw, bool):
        return {"literalBoolean": raw}
    if isinstance(raw, (int, float)):
        return {"literalNumber": raw}
    if isinstance(raw, str):
        return {"literalString": raw}
    if isinstance(raw, Mapping) and "literalBool" in raw and "literalBoolean" not in raw:
        return {**raw, "literalBoolean": raw["literalBool"]}
    return raw


def _unwrap_literal(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        for key in LITERAL_KEYS:
            if key in raw:
                return raw[key]
    return raw


def _child_ids(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("explicitList", [])
    return raw


Bound = Annotated[BoundValue, BeforeValidator(_coerce_bound)]
Hint = Annotated[str, BeforeValidator(_unwrap_literal)]
ChildIds = Annotated[list[str], BeforeValidator(_child_ids)]


class ComponentProps(BaseModel):
    """Base for typed property bags."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="allow"
    )


class OpaqueProperties(ComponentProps):
    """Fallback for unknown types: every property kept verbatim as an extra field."""

    pass


CATALOG: dict[str, type[ComponentProps]] = {}


def register_component(*names: str) -> Callable[[type[ComponentProps]], type[ComponentProps]]:
    """Register a property model under one or more component type names."""

    def decorator(model: type[ComponentProps]) -> type[ComponentProps]:
        for name in names:
            CATALOG[name] = model
        return model

    return decorator


def is_known(type_name: str) -> bool:
    """True if the type has a registered property model."""
    return type_name in CATALOG


def typed_properties(type_name: str, properties: Mapping[str, Any]) -> ComponentProps:
    """
    Validate a raw property bag against the catalog.

    Never raises: unknown types and invalid bags come back as OpaqueProperties.
    """
    model = CATALOG.get(type_name)
    if model is None:
        return OpaqueProperties.model_validate(dict(properties))
    try:
        return model.model_validate(dict(properties))
    except ValidationError as e:
        logger.debug("component_properties_invalid", type=type_name, errors=e.error_count())
        return OpaqueProperties.model_validate(dict(properties))


# ============================================================================
# Layout
# ============================================================================


class ContainerProps(ComponentProps):
    children: ChildIds = Field(default_factory=list)


@register_component("Row", "Column")
class FlexProps(ContainerProps):
    alignment: Hint | None = None
    distribution: Hint | None = None


@register_component("Card", "List", "Table", "TableHeader", "TableBody", "TableRow", "ScrollArea")
class GenericContainerProps(ContainerProps):
    pass


@register_component("Grid")
class GridProps(ContainerProps):
    columns: str | None = None
    min_column_width: str | None = None
    gap: int | float | str | None = None
    justify_items: str | None = None
    align_items: str | None = None


class TabItem(ComponentProps):
    title: Bound | None = None
    child: str | None = None


@register_component("Tabs")
class TabsProps(ComponentProps):
    tab_items: list[TabItem] = Field(default_factory=list)


@register_component("Modal")
class ModalProps(ComponentProps):
    entry_point_child: str | None = None
    content_child: str | None = None


@register_component("Divider", "Separator")
class DividerProps(ComponentProps):
    axis: Hint | None = None
    orientation: Hint | None = None
    color: str | None = None
    thickness: int | float | None = None


# ============================================================================
# Content
# ============================================================================


@register_component("Text")
class TextProps(ComponentProps):
    text: Bound | None = None
    usage_hint: Hint | None = None


@register_component("Badge")
class BadgeProps(ComponentProps):
    text: Bound | None = None
    variant: Hint | None = None


@register_component("Image")
class ImageProps(ComponentProps):
    url: Bound | None = None
    alt: Bound | None = None
    usage_hint: Hint | None = None
    fit: Hint | None = None


@register_component("Icon")
class IconProps(ComponentProps):
    name: Bound | None = None


@register_component("Video", "AudioPlayer")
class MediaProps(ComponentProps):
    url: Bound | None = None
    description: Bound | None = None


@register_component("Alert")
class AlertProps(ComponentProps):
    title: Bound | None = None
    description: Bound | None = None
    variant: Hint | None = None


@register_component("Avatar")
class AvatarProps(ComponentProps):
    src: Bound | None = None
    alt: Bound | None = None
    fallback: str | None = None
    size: Hint | None = None


@register_component("Progress")
class ProgressProps(ComponentProps):
    value: int | float | None = None
    max: int | float | None = None
    show_label: bool | None = None


@register_component("TableCell")
class TableCellProps(ComponentProps):
    text: Bound | None = None
    is_header: bool | None = None
    align: Hint | None = None


# ============================================================================
# Interactive
# ============================================================================


@register_component("Button")
class ButtonProps(ComponentProps):
    child: str | None = None
    label: Bound | None = None
    action: Action | None = None
    variant: Hint | None = None
    disabled: bool | None = None


@register_component("Link")
class LinkProps(ComponentProps):
    href: Bound | None = None
    text: Bound | None = None
    external: bool | None = None
    action: Action | None = None


@register_component("CheckBox", "Checkbox")
class CheckBoxProps(ComponentProps):
    label: Bound | None = None
    value: Bound | None = None


@register_component("TextField")
class TextFieldProps(ComponentProps):
    text: Bound | None = None
    label: Bound | None = None
    type: Hint | None = None
    validation_regexp: str | None = None


@register_component("DateTimeInput")
class DateTimeInputProps(ComponentProps):
    value: Bound | None = None
    enable_date: bool | None = None
    enable_time: bool | None = None
    output_format: str | None = None


class ChoiceOption(ComponentProps):
    label: Bound | None = None
    value: str


@register_component("MultipleChoice")
class MultipleChoiceProps(ComponentProps):
    selections: dict[str, Any] | None = None
    options: list[ChoiceOption] = Field(default_factory=list)
    max_allowed_selections: int | None = None


@register_component("Select")
class SelectProps(ComponentProps):
    label: Bound | None = None
    options: list[ChoiceOption] = Field(default_factory=list)
    value: Bound | None = None
    placeholder: Bound | None = None


@register_component("Slider")
class SliderProps(ComponentProps):
    value: Bound | None = None
    min_value: int | float | None = None
    max_value: int | float | None = None


@register_component("Switch")
class SwitchProps(ComponentProps):
    checked: bool | None = None
    disabled: bool | None = None
    label: Bound | None = None
    on_change: Action | None = None


@register_component("Input", "TextArea")
class InputProps(ComponentProps):
    type: Hint | None = None
    value: Bound | None = None
    placeholder: Bound | None = None
    disabled: bool | None = None
    read_only: bool | None = None
    on_change: Action | None = None


@register_component("Dialog", "Sheet")
class DialogProps(ContainerProps):
    open: bool | None = None
    title: Bound | None = None
    description: Bound | None = None
    on_close: Action | None = None


__all__ = [
    "ComponentProps",
    "OpaqueProperties",
    "CATALOG",
    "register_component",
    "is_known",
    "typed_properties",
]
