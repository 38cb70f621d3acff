"""Conversion between HTML text and hast-style trees."""

from __future__ import annotations

import html
from collections.abc import Mapping
from xml.dom import Node as DomNode

import html5lib

from .config import SlugConfig
from .constants import DOCUMENT_START, RAW_TEXT_ELEMENTS, VOID_ELEMENTS
from .transformer import HeadingSlugTransformer
from .tree import Node


def parse_html(text: str) -> Node:
    """Parse HTML into a hast-style tree.

    Parsing follows the HTML5 tree construction rules, so omitted end tags
    are implied and mis-nested markup is repaired the way browsers do it.
    Text that starts with a doctype or an ``<html>`` tag is parsed as a whole
    document, with ``html``, ``head`` and ``body`` added where missing.
    Anything else is parsed as a fragment in the body of a document.

    Args:
        text: HTML source.

    Returns:
        Node: A ``"root"`` node holding the parsed content.

    Examples:
        parse_html("<h1>Title</h1>")["children"][0]["tagName"]  # "h1"
    """
    if DOCUMENT_START.match(text):
        dom = html5lib.parse(text, treebuilder="dom", namespaceHTMLElements=False)
    else:
        dom = html5lib.parseFragment(text, treebuilder="dom", namespaceHTMLElements=False)

    root: Node = {"type": "root", "children": []}
    pending = [(dom, root)]
    while pending:
        source, target = pending.pop()
        for child in source.childNodes:
            node = _convert_dom_node(child)
            if node is None:
                continue
            target["children"].append(node)
            if node["type"] == "element":
                pending.append((child, node))
    return root


def _convert_dom_node(dom_node) -> Node | None:
    if dom_node.nodeType == DomNode.ELEMENT_NODE:
        return {
            "type": "element",
            "tagName": dom_node.tagName,
            "properties": dict(dom_node.attributes.items()),
            "children": [],
        }
    if dom_node.nodeType == DomNode.TEXT_NODE:
        return {"type": "text", "value": dom_node.data}
    if dom_node.nodeType == DomNode.COMMENT_NODE:
        return {"type": "comment", "value": dom_node.data}
    if dom_node.nodeType == DomNode.DOCUMENT_TYPE_NODE:
        return {"type": "doctype", "value": _doctype_value(dom_node)}
    return None


def _doctype_value(doctype) -> str:
    value = doctype.name or "html"
    if doctype.publicId:
        value += f' PUBLIC "{doctype.publicId}"'
        if doctype.systemId:
            value += f' "{doctype.systemId}"'
    elif doctype.systemId:
        value += f' SYSTEM "{doctype.systemId}"'
    return value


def to_html(node: object) -> str:
    """Serialize a hast-style tree back to HTML.

    Text is escaped except inside ``script`` and ``style``. Attributes with an
    empty value are written as bare names. Nesting depth is not limited by
    the interpreter's recursion limit.

    Examples:
        to_html(parse_html('<h1 class="title">Title</h1>'))  # '<h1 class="title">Title</h1>'
    """
    parts: list[str] = []
    # Entries are (node, inside raw text, end tag); an end tag entry carries no node
    pending: list[tuple[object, bool, str | None]] = [(node, False, None)]

    while pending:
        current, raw_text, end_tag = pending.pop()
        if end_tag is not None:
            parts.append(end_tag)
            continue

        if not isinstance(current, dict):
            continue

        node_type = current.get("type")
        value = current.get("value")
        value = value if isinstance(value, str) else ""

        if node_type == "text":
            parts.append(value if raw_text else html.escape(value, quote=False))
        elif node_type == "comment":
            parts.append(f"<!--{value}-->")
        elif node_type == "doctype":
            parts.append(f"<!DOCTYPE {value or 'html'}>")
        elif node_type in ("root", "element"):
            tag = current.get("tagName") if node_type == "element" else None
            if tag:
                parts.append(f"<{tag}{_serialize_attributes(current.get('properties'))}>")
                if tag in VOID_ELEMENTS:
                    continue
                pending.append((None, raw_text, f"</{tag}>"))

            children = current.get("children")
            if isinstance(children, list):
                child_raw_text = raw_text or tag in RAW_TEXT_ELEMENTS
                pending.extend((child, child_raw_text, None) for child in reversed(children))

    return "".join(parts)


def _serialize_attributes(properties: object) -> str:
    if not isinstance(properties, dict):
        return ""

    parts = []
    for name, value in properties.items():
        if value is None or value is False:
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(str(item) for item in value)
        if value is True or value == "":
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def process_html(text: str, config: SlugConfig | Mapping[str, object] | None = None) -> str:
    """Assign heading ids in an HTML string.

    Args:
        text: HTML source.
        config: Options for `HeadingSlugTransformer`.

    Returns:
        str: The HTML with heading ids assigned and explicit notation removed.

    Raises:
        ConfigError: If the configuration is invalid.
        SlugError: If a heading violates a policy configured as ``"error"``.

    Examples:
        process_html("<h1>Hello World</h1>")  # '<h1 id="hello-world">Hello World</h1>'
    """
    tree = parse_html(text)
    HeadingSlugTransformer(config).transform(tree)
    return to_html(tree)
