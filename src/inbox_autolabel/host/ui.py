from __future__ import annotations

from typing import List, Optional, Protocol


class UiNode(Protocol):
    """Read-only view of a node around the clicked message, used for sender lookup."""

    @property
    def parent(self) -> Optional["UiNode"]: ...

    def get_attribute(self, name: str) -> Optional[str]: ...
    def has_attribute(self, name: str) -> bool: ...
    def select_first(self, selector: str) -> Optional["UiNode"]: ...
    def text_content(self) -> str: ...


class UiElement(Protocol):
    """Live element of the host page. Valid only until the page re-renders."""

    async def text(self) -> str: ...
    async def click(self) -> None: ...
    async def value(self) -> str: ...
    async def set_value(self, value: str) -> None:
        """Set the input value and dispatch the host's `input` notification."""
        ...
    async def is_checked(self) -> bool: ...


class HostUI(Protocol):
    """The few capabilities the workflow needs from the mail client's page."""

    async def get_location(self) -> str: ...
    async def set_location(self, location: str) -> None: ...
    async def count(self, selector: str) -> int: ...
    async def query_all(self, selector: str) -> List[UiElement]: ...
    async def find_clickable(self, selector: str, text: str) -> Optional[UiElement]:
        """First element matching selector whose text contains `text`."""
        ...
    async def find_input_by_label(self, label_text: str) -> Optional[UiElement]: ...


class Notifier(Protocol):
    """Blocking user-facing messages: alerts and the label prompt."""

    async def alert(self, message: str) -> None: ...
    async def prompt(self, message: str) -> Optional[str]: ...
