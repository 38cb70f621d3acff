"""Helpers for walking and editing hast-style document trees.

Nodes are plain dictionaries with a ``type`` key: ``"root"`` and
``"element"`` nodes hold a ``children`` list, elements also have a
``tagName`` and a ``properties`` mapping of attributes, and ``"text"`` nodes
carry their content in ``value``. Malformed nodes are skipped rather than
rejected.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .constants import HEADING_PATTERN

Node = dict[str, Any]


def iter_nodes(node: object, node_type: str | None = None) -> Iterator[Node]:
    """Yield nodes depth-first in document order.

    A node's children are read after the node itself has been yielded, so
    changes a consumer makes to them are honoured.

    Args:
        node: Root of the tree to walk.
        node_type: Only yield nodes whose ``type`` equals this value.

    Yields:
        Node: Matching nodes, parents before their children.

    Examples:
        headings = [n for n in iter_nodes(tree, "element") if is_heading_node(n)]
    """
    pending = [node]
    while pending:
        current = pending.pop()
        if not isinstance(current, dict):
            continue

        if node_type is None or current.get("type") == node_type:
            yield current

        children = current.get("children")
        if isinstance(children, list):
            pending.extend(reversed(children))


def is_heading_node(node: object) -> bool:
    """Check whether `node` is an ``h1``-``h6`` element."""
    if not isinstance(node, dict) or node.get("type") != "element":
        return False
    tag_name = node.get("tagName")
    return isinstance(tag_name, str) and HEADING_PATTERN.fullmatch(tag_name) is not None


def extract_heading_text(node: object) -> str:
    """Concatenate every text node below `node` in document order.

    Examples:
        extract_heading_text({"type": "element", "tagName": "h1", "children": [
            {"type": "text", "value": "Hello "},
            {"type": "element", "tagName": "em", "children": [{"type": "text", "value": "World"}]},
        ]})  # "Hello World"
    """
    return "".join(
        text_node["value"]
        for text_node in _iter_text_nodes(node)
        if isinstance(text_node.get("value"), str)
    )


def update_text_nodes(node: Node, new_text: str) -> None:
    """Replace the text content of a heading.

    A heading made only of text nodes gets a single text node holding
    `new_text`. Otherwise the new text is poured into the existing text nodes
    front to back, each keeping at most its original length, so inline markup
    stays where it was.

    Args:
        node: Heading element to update in place.
        new_text: Replacement text content.
    """
    children = node.get("children")
    if not isinstance(children, list):
        return

    if all(isinstance(child, dict) and child.get("type") == "text" for child in children):
        node["children"] = [{"type": "text", "value": new_text}]
        return

    distribute_text(node, new_text)


def distribute_text(node: Node, new_text: str) -> None:
    """Pour `new_text` into the text nodes below `node`, keeping their lengths.

    Text nodes past the end of `new_text` become empty.

    Examples:
        # "Multiple" + <strong>"Text"</strong> + "Nodes {#id}" with new text
        # "MultipleTextNodes" becomes "Multiple" + "Text" + "Nodes"
    """
    remaining = new_text
    for text_node in _iter_text_nodes(node):
        value = text_node.get("value")
        if not isinstance(value, str):
            continue
        text_node["value"] = remaining[: len(value)]
        remaining = remaining[len(value) :]


def _iter_text_nodes(node: object) -> Iterator[Node]:
    # Text nodes in document order, looking only inside elements
    pending = [node]
    while pending:
        current = pending.pop()
        if not isinstance(current, dict):
            continue

        if current.get("type") == "text":
            yield current
            continue

        children = current.get("children")
        if current.get("type") == "element" and isinstance(children, list):
            pending.extend(reversed(children))
