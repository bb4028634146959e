from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

# One simple selector inside a compound one: tag, #id, .class or [attr] / [attr="v"].
_SIMPLE_SELECTOR = re.compile(
    r"""
    \#(?P<id>[\w:-]+)
    |\.(?P<cls>[\w-]+)
    |\[\s*(?P<attr>[\w-]+)\s*(?:=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s]*)))?\s*\]
    |(?P<tag>\*|[a-zA-Z][\w-]*)
    """,
    re.VERBOSE,
)

# (kind, name, expected value)
Condition = Tuple[str, str, Optional[str]]


def parse_selector(selector: str) -> List[List[Condition]]:
    """
    Parse a comma-separated list of compound selectors.
    Combinators (descendant, child, sibling) are not supported.
    """
    compounds: List[List[Condition]] = []
    for part in selector.split(","):
        part = part.strip()
        if not part:
            raise ValueError(f"Empty selector in {selector!r}")

        conditions: List[Condition] = []
        pos = 0
        while pos < len(part):
            match = _SIMPLE_SELECTOR.match(part, pos)
            if not match:
                raise ValueError(f"Unsupported selector {part!r}")
            if match.group("id") is not None:
                conditions.append(("attr", "id", match.group("id")))
            elif match.group("cls") is not None:
                conditions.append(("class", match.group("cls"), None))
            elif match.group("attr") is not None:
                expected = next(
                    (g for g in (match.group("dq"), match.group("sq"), match.group("bare")) if g is not None),
                    None,
                )
                conditions.append(("attr", match.group("attr"), expected))
            elif match.group("tag") != "*":
                conditions.append(("tag", match.group("tag").lower(), None))
            pos = match.end()
        compounds.append(conditions)
    return compounds


@dataclass(eq=False)
class SnapshotNode:
    """
    Detached copy of a DOM node, good for the synchronous sender heuristics.

    Snapshots captured from the browser hold one node per ancestor level; their
    `children` only contain the descendants the heuristics asked for.
    """

    tag: str = "div"
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: List["SnapshotNode"] = field(default_factory=list)
    parent: Optional["SnapshotNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        for child in self.children:
            child.parent = self

    # --- UiNode ---

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def text_content(self) -> str:
        return self.text + "".join(child.text_content() for child in self.children)

    def select_first(self, selector: str) -> Optional["SnapshotNode"]:
        """First descendant (document order, self excluded) matching selector."""
        compounds = parse_selector(selector)
        for node in self.descendants():
            if any(node._matches(conditions) for conditions in compounds):
                return node
        return None

    # --- Helpers ---

    @property
    def classes(self) -> List[str]:
        return self.attributes.get("class", "").split()

    def matches(self, selector: str) -> bool:
        return any(self._matches(conditions) for conditions in parse_selector(selector))

    def descendants(self) -> Iterator["SnapshotNode"]:
        for child in self.children:
            yield child
            yield from child.descendants()

    def _matches(self, conditions: Sequence[Condition]) -> bool:
        for kind, name, expected in conditions:
            if kind == "tag" and self.tag != name:
                return False
            if kind == "class" and name not in self.classes:
                return False
            if kind == "attr":
                if name not in self.attributes:
                    return False
                if expected is not None and self.attributes[name] != expected:
                    return False
        return True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotNode":
        return cls(
            tag=str(data.get("tag") or "div"),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
            text=str(data.get("text") or ""),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )

    @classmethod
    def from_chain(cls, levels: Sequence[Dict[str, Any]]) -> Optional["SnapshotNode"]:
        """
        Build the origin node from an ancestor chain (origin first).
        Each level's parent is the next entry of the chain.
        """
        nodes = [cls.from_dict(level) for level in levels]
        for child, parent in zip(nodes, nodes[1:]):
            child.parent = parent
        return nodes[0] if nodes else None
