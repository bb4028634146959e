from __future__ import annotations

from typing import Optional, Sequence, Tuple

# (label text, value of its `for` attribute)
LabelInfo = Tuple[str, Optional[str]]


def pick_label_target(labels: Sequence[LabelInfo], label_text: str) -> Optional[str]:
    """
    Resolve the input id associated with a <label> by its text.

    Gmail ties inputs to <label for="id">Text</label>. An exact (trimmed) text
    match wins; otherwise the first case-insensitive substring match is used.
    """
    match = next((lbl for lbl in labels if (lbl[0] or "").strip() == label_text), None)

    if match is None:
        needle = label_text.lower()
        match = next((lbl for lbl in labels if needle in (lbl[0] or "").lower()), None)

    if match is None:
        print(f"[WARN] Could not find label with text: {label_text!r}")
        return None

    input_id = match[1]
    if not input_id:
        print(f"[WARN] Label {label_text!r} has no 'for' attribute")
        return None

    return input_id