from __future__ import annotations

from heading_slug.tree import (
    distribute_text,
    extract_heading_text,
    is_heading_node,
    iter_nodes,
    update_text_nodes,
)


def _text(value: str) -> dict:
    return {"type": "text", "value": value}


def _element(tag: str, *children: dict) -> dict:
    return {"type": "element", "tagName": tag, "properties": {}, "children": list(children)}


def test_iter_nodes_walks_in_document_order():
    tree = {
        "type": "root",
        "children": [
            _element("section", _element("h1", _text("A")), _element("h2", _text("B"))),
            _element("h3", _text("C")),
        ],
    }

    tags = [node["tagName"] for node in iter_nodes(tree, "element")]

    assert tags == ["section", "h1", "h2", "h3"]


def test_iter_nodes_without_filter_yields_every_node():
    tree = {"type": "root", "children": [_element("p", _text("x"))]}

    assert [node["type"] for node in iter_nodes(tree)] == ["root", "element", "text"]


def test_iter_nodes_skips_malformed_nodes():
    tree = {"type": "root", "children": ["stray", None, {"type": "element", "children": "bad"}]}

    assert len(list(iter_nodes(tree, "element"))) == 1


def test_iter_nodes_reads_children_after_yielding():
    heading = _element("h1", _text("old"))
    tree = {"type": "root", "children": [heading]}

    seen = []
    for node in iter_nodes(tree):
        if node is heading:
            heading["children"] = [_text("new")]
        if node.get("type") == "text":
            seen.append(node["value"])

    assert seen == ["new"]


def test_is_heading_node():
    assert is_heading_node(_element("h1"))
    assert is_heading_node(_element("h6"))
    assert not is_heading_node(_element("h7"))
    assert not is_heading_node(_element("h10"))
    assert not is_heading_node(_element("header"))
    assert not is_heading_node({"type": "text", "value": "h1"})
    assert not is_heading_node({"type": "element", "tagName": None})


def test_extract_heading_text_concatenates_nested_text():
    heading = _element(
        "h2", _text("Hello "), _element("em", _text("big ")), {"type": "comment", "value": "x"}, _text("World")
    )

    assert extract_heading_text(heading) == "Hello big World"


def test_extract_heading_text_tolerates_malformed_nodes():
    heading = {"type": "element", "tagName": "h1", "children": [_text("A"), {"type": "text"}, 3]}

    assert extract_heading_text(heading) == "A"
    assert extract_heading_text(None) == ""


def test_update_text_nodes_merges_plain_text_children():
    heading = _element("h1", _text("Title "), _text("{#slug}"))

    update_text_nodes(heading, "Title")

    assert heading["children"] == [_text("Title")]


def test_update_text_nodes_keeps_inline_markup():
    strong = _element("strong", _text("Text"))
    heading = _element("h1", _text("Multiple"), strong, _text("Nodes {#multi-text}"))

    update_text_nodes(heading, "MultipleTextNodes")

    assert heading["children"][0] == _text("Multiple")
    assert heading["children"][1] is strong
    assert strong["children"] == [_text("Text")]
    assert heading["children"][2] == _text("Nodes")


def test_distribute_text_empties_trailing_nodes():
    heading = _element("h1", _text("Intro"), _element("code", _text("{#x}")))

    distribute_text(heading, "Int")

    assert extract_heading_text(heading) == "Int"
    assert heading["children"][1]["children"][0]["value"] == ""


def _nested(depth: int, innermost: dict) -> dict:
    node = innermost
    for _ in range(depth):
        node = _element("span", node)
    return node


def test_iter_nodes_walks_deeply_nested_trees():
    tree = {"type": "root", "children": [_nested(5000, _element("h2", _text("Deep")))]}

    headings = [node for node in iter_nodes(tree, "element") if is_heading_node(node)]

    assert len(headings) == 1
    assert headings[0]["children"] == [_text("Deep")]


def test_extract_and_distribute_text_in_deeply_nested_heading():
    heading = _element("h1", _text("Top "), _nested(5000, _text("Bottom {#x}")))

    assert extract_heading_text(heading) == "Top Bottom {#x}"

    distribute_text(heading, "Top Bottom")

    assert extract_heading_text(heading) == "Top Bottom"
