from __future__ import annotations

import pytest

from inbox_autolabel.host.snapshot import SnapshotNode, parse_selector


def _tree() -> SnapshotNode:
    return SnapshotNode(
        tag="div",
        attributes={"class": "Tm aeJ"},
        children=[
            SnapshotNode(tag="span", attributes={"role": "link"}, text="Create a new filter"),
            SnapshotNode(
                tag="tr",
                attributes={"data-filter-id": "1"},
                children=[SnapshotNode(tag="span", attributes={"class": "gD", "email": "a@b.co"}, text="A")],
            ),
        ],
    )


def test_parse_selector_splits_compounds() -> None:
    compounds = parse_selector('button, span[role="link"], .Tm.aeJ')
    assert compounds == [
        [("tag", "button", None)],
        [("tag", "span", None), ("attr", "role", "link")],
        [("class", "Tm", None), ("class", "aeJ", None)],
    ]


def test_parse_selector_rejects_combinators() -> None:
    with pytest.raises(ValueError):
        parse_selector("div > span")


def test_select_first_searches_descendants_only() -> None:
    root = _tree()
    assert root.select_first(".Tm") is None
    assert root.select_first("[email]").get_attribute("email") == "a@b.co"
    assert root.select_first('span[role="link"]').text_content() == "Create a new filter"
    assert root.select_first(".go, .gD, .g2").text_content() == "A"


def test_matches_and_text_content() -> None:
    root = _tree()
    assert root.matches(".Tm.aeJ, .aKh")
    assert not root.matches(".aKh")
    assert root.text_content() == "Create a new filterA"


def test_from_chain_links_parents() -> None:
    origin = SnapshotNode.from_chain([{"tag": "SPAN"}, {"tag": "div", "attributes": {"email": "x@y.z"}}])
    assert origin.tag == "span"
    assert origin.parent.get_attribute("email") == "x@y.z"
    assert origin.parent.parent is None
    assert SnapshotNode.from_chain([]) is None
