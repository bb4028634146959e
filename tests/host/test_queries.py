from __future__ import annotations

from inbox_autolabel.host.queries import pick_label_target


LABELS = [
    ("From", "f1"),
    ("To", "f2"),
    ("Doesn't have", "f3"),
    ("Apply the label: ", "f4"),
    ("Has attachment", None),
]


def test_exact_match_wins_over_contains() -> None:
    labels = [("From address", "wrong"), ("From", "right")]
    assert pick_label_target(labels, "From") == "right"


def test_contains_match_is_case_insensitive() -> None:
    assert pick_label_target(LABELS, "doesn't HAVE") == "f3"
    assert pick_label_target(LABELS, "Apply the label:") == "f4"


def test_missing_label_or_for_attribute(capsys) -> None:
    assert pick_label_target(LABELS, "Subject") is None
    assert pick_label_target(LABELS, "Has attachment") is None
    out = capsys.readouterr().out
    assert "Could not find label" in out
    assert "no 'for' attribute" in out
