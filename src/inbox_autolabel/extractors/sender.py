from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from inbox_autolabel.host.ui import UiNode
from inbox_autolabel.parsing.address import extract_email_address, validate_email

DEFAULT_MAX_LEVELS = 15


class SenderStrategy(ABC):
    """One heuristic for reading the sender address off a single ancestor level."""

    # Human-/debug-friendly unique name
    name: str = "base_strategy"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    @abstractmethod
    def candidate(self, node: UiNode) -> Optional[str]:
        """Return a raw candidate address for this level, or None."""
        raise NotImplementedError


class EmailAttributeDescendant(SenderStrategy):
    """Gmail tags sender chips with an `email` attribute."""

    name = "email_attribute_descendant"

    def __init__(self, attribute: str = "email") -> None:
        self.attribute = attribute

    def candidate(self, node: UiNode) -> Optional[str]:
        found = node.select_first(f"[{self.attribute}]")
        return found.get_attribute(self.attribute) if found else None


class OwnEmailAttribute(SenderStrategy):
    name = "own_email_attribute"

    def __init__(self, attribute: str = "email") -> None:
        self.attribute = attribute

    def candidate(self, node: UiNode) -> Optional[str]:
        if not node.has_attribute(self.attribute):
            return None
        return node.get_attribute(self.attribute)


class SenderDisplayText(SenderStrategy):
    """Parse the visible sender text, e.g. 'Jane Doe <jane@example.com>'."""

    name = "sender_display_text"

    def __init__(self, selector: str = ".go, .gD, .g2") -> None:
        self.selector = selector

    def candidate(self, node: UiNode) -> Optional[str]:
        found = node.select_first(self.selector)
        if not found:
            return None
        return extract_email_address(found.text_content() or "")


def default_strategies(
    *, email_attribute: str = "email", sender_display: str = ".go, .gD, .g2"
) -> list[SenderStrategy]:
    # Order matters: explicit attributes are more reliable than display text.
    return [
        EmailAttributeDescendant(email_attribute),
        OwnEmailAttribute(email_attribute),
        SenderDisplayText(sender_display),
    ]


def extract_sender(
    origin: Optional[UiNode],
    *,
    max_levels: int = DEFAULT_MAX_LEVELS,
    strategies: Optional[Sequence[SenderStrategy]] = None,
) -> Optional[str]:
    """
    Walk up from the clicked node and return the first valid sender address.

    None is an expected result (the click landed outside any message) and
    callers should ask the user to click more precisely.
    """
    chain = list(strategies) if strategies is not None else default_strategies()

    current = origin
    level = 0
    while current is not None and level < max_levels:
        for strategy in chain:
            address = (strategy.candidate(current) or "").strip()
            if address and validate_email(address):
                return address
        current = current.parent
        level += 1

    return None
