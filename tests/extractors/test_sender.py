from __future__ import annotations

from fake_gmail import message_snapshot

from inbox_autolabel.extractors.sender import (
    EmailAttributeDescendant,
    OwnEmailAttribute,
    SenderDisplayText,
    extract_sender,
)
from inbox_autolabel.host.snapshot import SnapshotNode


def _chain(depth: int, leaf: SnapshotNode) -> SnapshotNode:
    """Wrap `leaf` in `depth` plain divs and return the outermost one."""
    node = leaf
    for _ in range(depth):
        node = SnapshotNode(tag="div", children=[node])
    return node


def test_extracts_from_sender_display_text_of_ancestor() -> None:
    assert extract_sender(message_snapshot()) == "jane@example.com"


def test_email_attribute_beats_display_text() -> None:
    clicked = SnapshotNode(tag="span", text="Subject")
    SnapshotNode(
        tag="div",
        children=[
            SnapshotNode(tag="span", attributes={"class": "gD"}, text="Other <other@example.com>"),
            SnapshotNode(tag="span", attributes={"email": "jane@example.com", "name": "Jane"}),
            clicked,
        ],
    )
    assert extract_sender(clicked) == "jane@example.com"


def test_own_email_attribute_is_used() -> None:
    node = SnapshotNode(tag="span", attributes={"email": "self@example.com"})
    assert extract_sender(node) == "self@example.com"


def test_invalid_attribute_falls_through_to_later_levels() -> None:
    clicked = SnapshotNode(tag="span", attributes={"email": "not-an-address"})
    SnapshotNode(tag="div", children=[
        SnapshotNode(tag="span", attributes={"class": "g2"}, text="bob@example.org"),
        clicked,
    ])
    assert extract_sender(clicked) == "bob@example.org"


def test_walk_stops_after_max_levels() -> None:
    clicked = SnapshotNode(tag="span", text="deep")
    SnapshotNode(
        tag="div",
        children=[
            SnapshotNode(tag="span", attributes={"class": "go"}, text="far@example.com"),
            _chain(15, clicked),
        ],
    )
    # clicked + 15 wrappers = 16 levels below the root carrying the sender.
    assert extract_sender(clicked) is None
    assert extract_sender(clicked, max_levels=17) == "far@example.com"


def test_no_sender_anywhere_returns_none() -> None:
    clicked = SnapshotNode(tag="span", text="Hello")
    SnapshotNode(tag="div", children=[clicked, SnapshotNode(tag="span", attributes={"class": "go"}, text="Jane")])
    assert extract_sender(clicked) is None
    assert extract_sender(None) is None


def test_custom_strategy_order() -> None:
    clicked = SnapshotNode(tag="span", attributes={"email": "own@example.com"})
    SnapshotNode(tag="div", children=[clicked])
    # Only display text is consulted, and there is none.
    assert extract_sender(clicked, strategies=[SenderDisplayText()]) is None
    assert extract_sender(clicked, strategies=[OwnEmailAttribute(), EmailAttributeDescendant()]) == "own@example.com"


def test_browser_snapshot_chain() -> None:
    # Shape produced by capture_origin: one node per ancestor, only captured descendants.
    origin = SnapshotNode.from_chain(
        [
            {"tag": "span", "attributes": {"class": "bog"}, "children": []},
            {"tag": "td", "attributes": {}, "children": []},
            {
                "tag": "tr",
                "attributes": {"class": "zA"},
                "children": [
                    {"tag": "span", "attributes": {"class": "yP", "email": "news@shop.example"}, "text": "Shop"},
                ],
            },
        ]
    )
    assert extract_sender(origin) == "news@shop.example"
