# sitebuilder/domain/props.py
"""
Typed views over ComponentNode.props, one variant per component type.

The persisted props map stays an open JSON object; these views only pin
down the fields the code generator relies on, with the same defaults the
builder applies when a component is dropped onto the canvas.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .document import ComponentNode


TEXT_TAGS = {"p", "span", "h1", "h2", "h3", "h4", "h5", "h6", "a", "label", "blockquote"}
LIST_TYPES = {"unordered", "ordered", "none"}
LINK_TYPES = {"external", "page", "anchor"}
FORM_FIELD_TYPES = {"text", "email", "tel", "number", "url", "password", "date", "textarea", "checkbox"}


def _str(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _config(props: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = props.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class TextProps:
    text: str = "Text"
    tag: str = "p"


@dataclass(frozen=True)
class ImageProps:
    src: str = ""
    alt: str = ""


@dataclass(frozen=True)
class ButtonProps:
    text: str = "Button"
    link_type: Optional[str] = None
    link_target: Optional[str] = None
    open_in_new_tab: bool = False

    @property
    def href(self) -> Optional[str]:
        if not self.link_type or not self.link_target:
            return None
        if self.link_type == "anchor":
            return f"#{self.link_target}"
        return self.link_target


@dataclass(frozen=True)
class LinkProps:
    href: str = "#"
    display_text: str = "Link"
    open_in_new_tab: bool = False


@dataclass(frozen=True)
class ListItem:
    text: str
    children: Tuple["ListItem", ...] = ()


@dataclass(frozen=True)
class ListProps:
    list_type: str = "unordered"
    items: Tuple[ListItem, ...] = ()

    @property
    def tag(self) -> str:
        return "ol" if self.list_type == "ordered" else "ul"


@dataclass(frozen=True)
class GridProps:
    rows: int = 2
    cols: int = 2
    gap: int = 16


@dataclass(frozen=True)
class FormField:
    name: str
    type: str = "text"
    label: str = ""
    placeholder: str = ""
    required: bool = False


@dataclass(frozen=True)
class FormProps:
    fields: Tuple[FormField, ...] = ()
    submit_text: str = "Submit"
    success_message: str = ""


@dataclass(frozen=True)
class ContainerProps:
    # Plain string attributes forwarded to the element (role, id, aria-*)
    attributes: Dict[str, str] = field(default_factory=dict)


ComponentProps = Union[
    TextProps,
    ImageProps,
    ButtonProps,
    LinkProps,
    ListProps,
    GridProps,
    FormProps,
    ContainerProps,
]


def _list_items(raw: Any) -> Tuple[ListItem, ...]:
    if not isinstance(raw, list):
        return ()
    items: List[ListItem] = []
    for item in raw:
        if isinstance(item, dict):
            items.append(ListItem(
                text=_str(item.get("text"), ""),
                children=_list_items(item.get("children")),
            ))
        elif item is not None:
            items.append(ListItem(text=_str(item, "")))
    return tuple(items)


def _form_fields(raw: Any) -> Tuple[FormField, ...]:
    if not isinstance(raw, list):
        return ()
    fields: List[FormField] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            continue
        field_type = _str(item.get("type"), "text")
        fields.append(FormField(
            name=_str(item.get("id") or item.get("name"), f"field-{index + 1}"),
            type=field_type if field_type in FORM_FIELD_TYPES else "text",
            label=_str(item.get("label"), ""),
            placeholder=_str(item.get("placeholder"), ""),
            required=bool(item.get("required", False)),
        ))
    return tuple(fields)


_RESERVED_ATTRIBUTES = {"style", "children", "key", "ref", "dangerouslySetInnerHTML"}


def _container_attributes(props: Dict[str, Any]) -> Dict[str, str]:
    return {
        key: value
        for key, value in sorted(props.items())
        if isinstance(value, str)
        and key not in _RESERVED_ATTRIBUTES
        and key[:1].isalpha()
        and key.replace("-", "").isalnum()
    }


def props_for(node: ComponentNode) -> ComponentProps:
    """Return the typed props variant for a node, keyed by its type."""
    props = node.props or {}

    if node.type == "Text":
        tag = _str(props.get("tag"), "p").lower()
        return TextProps(
            text=_str(props.get("text"), "Text"),
            tag=tag if tag in TEXT_TAGS else "p",
        )

    if node.type == "Image":
        return ImageProps(src=_str(props.get("src"), ""), alt=_str(props.get("alt"), ""))

    if node.type == "Button":
        link_type = props.get("linkType")
        link_target = props.get("linkTarget")
        return ButtonProps(
            text=_str(props.get("text") or props.get("label"), "Button"),
            link_type=link_type if isinstance(link_type, str) and link_type in LINK_TYPES else None,
            link_target=_str(link_target, "") or None,
            open_in_new_tab=bool(props.get("openInNewTab", False)),
        )

    if node.type == "Link":
        return LinkProps(
            href=_str(props.get("href"), "#") or "#",
            display_text=_str(props.get("displayText") or props.get("text"), "Link"),
            open_in_new_tab=bool(props.get("openInNewTab", False)),
        )

    if node.type == "List":
        config = _config(props, "listConfig")
        list_type = _str(config.get("type"), "unordered")
        return ListProps(
            list_type=list_type if list_type in LIST_TYPES else "unordered",
            items=_list_items(config.get("items")),
        )

    if node.type == "Grid":
        config = _config(props, "gridConfig")
        return GridProps(
            rows=max(_int(config.get("rows"), 2), 1),
            cols=max(_int(config.get("cols"), 2), 1),
            gap=max(_int(config.get("gap"), 16), 0),
        )

    if node.type == "Form":
        config = _config(props, "formConfig")
        return FormProps(
            fields=_form_fields(config.get("fields")),
            submit_text=_str(config.get("submitText"), "Submit"),
            success_message=_str(config.get("successMessage"), ""),
        )

    return ContainerProps(attributes=_container_attributes(props))
