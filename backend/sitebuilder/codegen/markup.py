# sitebuilder/codegen/markup.py
"""
Component tree -> JSX markup.

Each node becomes one element tagged by its type. Containers nest their
children in order; leaf types (and List, which renders its own items)
never descend into ``children``. Output depends on nothing but the node,
so the same tree always yields the same text.
"""
import json
import re
from typing import Any, Dict, List, Tuple

from sitebuilder.domain.document import ComponentNode
from sitebuilder.domain.props import (
    ButtonProps,
    ContainerProps,
    FormProps,
    GridProps,
    ImageProps,
    LinkProps,
    ListItem,
    ListProps,
    TextProps,
    props_for,
)

INDENT = "  "

CONTAINER_TAGS = {
    "Body": "div",
    "Section": "section",
    "Div": "div",
    "Container": "div",
    "Grid": "div",
}

# Characters that cannot appear verbatim in JSX text or a quoted attribute
_UNSAFE_TEXT = re.compile(r"[{}<>&\n\r]|^\s|\s$")
_UNSAFE_ATTR = re.compile(r'["{}<>&\\\n\r]')


def _literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def jsx_text(text: str) -> str:
    if not text:
        return ""
    if _UNSAFE_TEXT.search(text):
        return "{" + _literal(text) + "}"
    return text


def jsx_attr(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return name if value else ""
    if isinstance(value, str) and not _UNSAFE_ATTR.search(value):
        return f'{name}="{value}"'
    return f"{name}={{{_literal(value)}}}"


def jsx_style(styles: Dict[str, str]) -> str:
    if not styles:
        return ""
    return "style={" + _literal(styles) + "}"


def _open_tag(tag: str, attrs: List[str], *, self_closing: bool = False) -> str:
    parts = [tag] + [a for a in attrs if a]
    body = " ".join(parts)
    return f"<{body} />" if self_closing else f"<{body}>"


def _container_style(node: ComponentNode, props: Any) -> Dict[str, str]:
    if node.type == "Body":
        return {"minHeight": "100vh", "width": "100%", **node.styles}
    if isinstance(props, GridProps):
        return {
            "display": "grid",
            "gridTemplateRows": f"repeat({props.rows}, 1fr)",
            "gridTemplateColumns": f"repeat({props.cols}, 1fr)",
            "gap": f"{props.gap}px",
            **node.styles,
        }
    return dict(node.styles)


def _target_attrs(open_in_new_tab: bool) -> List[str]:
    if not open_in_new_tab:
        return []
    return [jsx_attr("target", "_blank"), jsx_attr("rel", "noopener noreferrer")]


def _list_lines(tag: str, items: Tuple[ListItem, ...], attrs: List[str], depth: int) -> List[str]:
    pad = INDENT * depth
    if not items:
        return [pad + _open_tag(tag, attrs, self_closing=True)]

    lines = [pad + _open_tag(tag, attrs)]
    for item in items:
        item_pad = INDENT * (depth + 1)
        if item.children:
            lines.append(item_pad + "<li>")
            if item.text:
                lines.append(INDENT * (depth + 2) + jsx_text(item.text))
            lines.extend(_list_lines(tag, item.children, [], depth + 2))
            lines.append(item_pad + "</li>")
        else:
            lines.append(f"{item_pad}<li>{jsx_text(item.text)}</li>")
    lines.append(f"{pad}</{tag}>")
    return lines


def _form_field_lines(props: FormProps, depth: int) -> List[str]:
    pad = INDENT * depth
    inner = INDENT * (depth + 1)
    lines: List[str] = []

    for field in props.fields:
        control = "textarea" if field.type == "textarea" else "input"
        attrs = [
            jsx_attr("id", field.name),
            jsx_attr("name", field.name),
        ]
        if control == "input":
            attrs.append(jsx_attr("type", field.type))
        if field.placeholder:
            attrs.append(jsx_attr("placeholder", field.placeholder))
        attrs.append(jsx_attr("required", field.required))

        lines.append(pad + "<div>")
        if field.label:
            label = _open_tag("label", [jsx_attr("htmlFor", field.name)])
            lines.append(f"{inner}{label}{jsx_text(field.label)}</label>")
        lines.append(inner + _open_tag(control, attrs, self_closing=True))
        lines.append(pad + "</div>")

    return lines


def render_node(node: ComponentNode, depth: int = 0) -> List[str]:
    """Render one node (and, for containers, its subtree) as indented lines."""
    pad = INDENT * depth
    props = props_for(node)
    style = jsx_style(node.styles)

    if isinstance(props, TextProps):
        open_tag = _open_tag(props.tag, [style])
        return [f"{pad}{open_tag}{jsx_text(props.text)}</{props.tag}>"]

    if isinstance(props, ImageProps):
        attrs = [jsx_attr("src", props.src), jsx_attr("alt", props.alt), style]
        return [pad + _open_tag("img", attrs, self_closing=True)]

    if isinstance(props, ButtonProps):
        button = _open_tag("button", [jsx_attr("type", "button"), style])
        button_line = f"{button}{jsx_text(props.text)}</button>"
        href = props.href
        if href is None:
            return [pad + button_line]
        anchor = _open_tag("a", [jsx_attr("href", href)] + _target_attrs(props.open_in_new_tab))
        return [pad + anchor, INDENT * (depth + 1) + button_line, pad + "</a>"]

    if isinstance(props, LinkProps):
        attrs = [jsx_attr("href", props.href)] + _target_attrs(props.open_in_new_tab) + [style]
        return [f"{pad}{_open_tag('a', attrs)}{jsx_text(props.display_text)}</a>"]

    if isinstance(props, ListProps):
        styles = dict(node.styles)
        if props.list_type == "none":
            styles = {"listStyleType": "none", "paddingLeft": "0", **styles}
        return _list_lines(props.tag, props.items, [jsx_style(styles)], depth)

    return _render_container(node, props, depth)


def _render_container(node: ComponentNode, props: Any, depth: int) -> List[str]:
    pad = INDENT * depth
    attrs: List[str] = []

    if node.type == "Body":
        attrs.append(jsx_attr("className", "builder-body-root"))
    if isinstance(props, ContainerProps):
        attrs.extend(
            jsx_attr(key, value)
            for key, value in props.attributes.items()
            if not (node.type == "Body" and key == "className")
        )
    attrs.append(jsx_style(_container_style(node, props)))

    body: List[str] = []
    if isinstance(props, FormProps):
        tag = "form"
        body.extend(_form_field_lines(props, depth + 1))
    else:
        tag = CONTAINER_TAGS.get(node.type, "div")

    for child in node.children:
        body.extend(render_node(child, depth + 1))

    if isinstance(props, FormProps):
        submit = _open_tag("button", [jsx_attr("type", "submit")])
        body.append(f"{INDENT * (depth + 1)}{submit}{jsx_text(props.submit_text)}</button>")

    if not body:
        return [pad + _open_tag(tag, attrs, self_closing=True)]

    return [pad + _open_tag(tag, attrs)] + body + [f"{pad}</{tag}>"]


def render_tree(tree: List[ComponentNode], depth: int = 0) -> str:
    lines: List[str] = []
    for node in tree:
        lines.extend(render_node(node, depth))
    return "\n".join(lines)
