from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from inbox_autolabel.errors import HostOperationFailed
from inbox_autolabel.host.queries import pick_label_target
from inbox_autolabel.host.snapshot import SnapshotNode


@asynccontextmanager
async def _host_call(action: str) -> AsyncIterator[None]:
    try:
        yield
    except PlaywrightError as exc:
        raise HostOperationFailed(f"{action} failed: {exc}") from exc


class PlaywrightElement:
    def __init__(self, handle: ElementHandle) -> None:
        self.handle = handle

    async def text(self) -> str:
        async with _host_call("Reading element text"):
            return await self.handle.text_content() or ""

    async def click(self) -> None:
        async with _host_call("Click"):
            await self.handle.click()

    async def value(self) -> str:
        async with _host_call("Reading input value"):
            return await self.handle.input_value()

    async def set_value(self, value: str) -> None:
        # Gmail's form state only picks up changes announced through an input event.
        async with _host_call("Setting input value"):
            await self.handle.evaluate(
                """(el, value) => {
                    el.value = value;
                    el.dispatchEvent(new Event("input", { bubbles: true }));
                }""",
                value,
            )

    async def is_checked(self) -> bool:
        async with _host_call("Reading checkbox state"):
            return await self.handle.is_checked()


class PlaywrightHostUI:
    """HostUI over a live Gmail tab. Every call re-queries the page."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def get_location(self) -> str:
        async with _host_call("Reading location"):
            return await self.page.evaluate("() => window.location.hash.replace(/^#/, '')")

    async def set_location(self, location: str) -> None:
        async with _host_call("Navigation"):
            await self.page.evaluate("(hash) => { window.location.hash = hash; }", location)

    async def count(self, selector: str) -> int:
        async with _host_call(f"Counting {selector!r}"):
            return await self.page.locator(selector).count()

    async def query_all(self, selector: str) -> List[PlaywrightElement]:
        async with _host_call(f"Querying {selector!r}"):
            handles = await self.page.query_selector_all(selector)
        return [PlaywrightElement(h) for h in handles]

    async def find_clickable(self, selector: str, text: str) -> Optional[PlaywrightElement]:
        for element in await self.query_all(selector):
            if text in await element.text():
                return element
        return None

    async def find_input_by_label(self, label_text: str) -> Optional[PlaywrightElement]:
        async with _host_call("Reading labels"):
            labels = await self.page.locator("label").evaluate_all(
                "(labels) => labels.map((l) => [l.textContent || '', l.getAttribute('for')])",
            )

        input_id = pick_label_target([(text, target) for text, target in labels], label_text)
        if input_id is None:
            return None

        async with _host_call(f"Looking up input {input_id!r}"):
            handle = await self.page.evaluate_handle("(id) => document.getElementById(id)", input_id)
            element = handle.as_element()
        if element is None:
            print(f"[WARN] Could not find input with id: {input_id!r}")
            return None
        return PlaywrightElement(element)


_CAPTURE_SCRIPT = """
(origin, [selectors, maxLevels, attributeNames]) => {
    const describe = (el) => {
        const attributes = {};
        for (const name of attributeNames) {
            if (el.hasAttribute(name)) attributes[name] = el.getAttribute(name);
        }
        if (el.id) attributes.id = el.id;
        const cls = el.getAttribute("class");
        if (cls) attributes["class"] = cls;
        return { tag: el.tagName.toLowerCase(), attributes, text: el.textContent || "" };
    };

    const levels = [];
    let current = origin.nodeType === Node.ELEMENT_NODE ? origin : origin.parentElement;
    for (let i = 0; i < maxLevels && current; i++) {
        const found = [];
        for (const sel of selectors) {
            const el = current.querySelector(sel);
            if (el && !found.includes(el)) found.push(el);
        }
        // Document order keeps "first match" identical to querySelector on the snapshot.
        found.sort((a, b) => (a.compareDocumentPosition(b) & Node.DOCUMENT_POSITION_FOLLOWING ? -1 : 1));

        const level = describe(current);
        level.text = "";
        level.children = found.map(describe);
        levels.push(level);
        current = current.parentElement;
    }
    return levels;
}
"""


async def capture_origin(
    handle: ElementHandle,
    *,
    selectors: Sequence[str],
    attribute_names: Sequence[str],
    max_levels: int,
) -> Optional[SnapshotNode]:
    """
    Snapshot the clicked element's ancestor chain for the sender heuristics.
    Taken once per trigger, before the workflow navigates anywhere.
    """
    async with _host_call("Capturing clicked element"):
        levels = await handle.evaluate(
            _CAPTURE_SCRIPT, [list(selectors), max_levels, list(attribute_names)]
        )
    return SnapshotNode.from_chain(levels or [])
