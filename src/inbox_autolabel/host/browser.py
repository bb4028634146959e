from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

from playwright.async_api import BrowserContext, ElementHandle, Page, Playwright, async_playwright

TriggerHandler = Callable[[ElementHandle], Awaitable[None]]

# Name of the page-level function the injected menu item calls.
TRIGGER_BINDING = "__autoLabelSender"
MENU_ITEM_TEXT = "Auto-Label Sender"

# Records the right-clicked element and adds our entry to Gmail's context menus.
_TRIGGER_SCRIPT = """
(() => {
    if (window.__autoLabelInstalled) return;
    window.__autoLabelInstalled = true;

    let rightClicked = null;
    document.addEventListener("contextmenu", (e) => { rightClicked = e.target; }, true);

    const inject = (menu) => {
        if (menu.offsetParent === null || menu.querySelector("[data-auto-label-sender]")) return;
        const item = document.createElement("div");
        item.setAttribute("role", "menuitem");
        item.setAttribute("data-auto-label-sender", "true");
        item.textContent = "%(text)s";
        item.style.cssText = "padding: 8px 16px; cursor: pointer; font-size: 14px; color: #202124;";
        item.addEventListener("click", (e) => {
            e.stopPropagation();
            menu.style.display = "none";
            if (rightClicked) window.%(binding)s(rightClicked);
        });
        menu.insertBefore(item, menu.firstChild);
    };

    const scan = () => document.querySelectorAll('[role="menu"]').forEach(inject);
    const start = () => {
        new MutationObserver(scan).observe(document.body, {
            childList: true, subtree: true, attributes: true, attributeFilter: ["style", "class"],
        });
        scan();
    };
    if (document.body) start();
    else document.addEventListener("DOMContentLoaded", start);
})()
""" % {"text": MENU_ITEM_TEXT, "binding": TRIGGER_BINDING}


@dataclass(frozen=True)
class GmailBrowserConfig:
    # Persistent Chromium profile; keeps the Gmail login between sessions.
    profile_dir: Path
    gmail_url: str = "https://mail.google.com/mail/u/0/"
    headless: bool = False
    channel: Optional[str] = None
    # Login may need 2FA, so give the first page load plenty of time.
    load_timeout_ms: int = 120_000


class GmailBrowser:
    def __init__(self, cfg: GmailBrowserConfig):
        self._cfg = cfg
        self._playwright: Optional[Playwright] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def connect(self) -> None:
        """Launch Chromium with the persistent profile and open Gmail."""
        self._cfg.profile_dir.mkdir(parents=True, exist_ok=True)
        self._playwright = await async_playwright().start()
        self._context = await self._playwright.chromium.launch_persistent_context(
            str(self._cfg.profile_dir),
            headless=self._cfg.headless,
            channel=self._cfg.channel,
            no_viewport=True,
        )
        pages = self._context.pages
        self._page = pages[0] if pages else await self._context.new_page()
        await self._page.goto(
            self._cfg.gmail_url,
            wait_until="domcontentloaded",
            timeout=self._cfg.load_timeout_ms,
        )
        if "accounts.google.com" in self._page.url:
            print("[auto-label] Please log in to Gmail in the opened browser window...")
            await self._page.wait_for_url(
                "https://mail.google.com/**", timeout=self._cfg.load_timeout_ms
            )

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("GmailBrowser is not connected. Call connect() first.")
        return self._page

    async def install_trigger(self, handler: TriggerHandler) -> None:
        """Add the context-menu entry; `handler` receives the right-clicked element."""
        if self._context is None:
            raise RuntimeError("GmailBrowser is not connected. Call connect() first.")

        async def on_trigger(_source: dict, handle: ElementHandle) -> None:
            await handler(handle)

        await self._context.expose_binding(TRIGGER_BINDING, on_trigger, handle=True)
        await self._context.add_init_script(script=_TRIGGER_SCRIPT)
        # Init scripts only run on new documents; cover the already open Gmail tab.
        await self.page.evaluate(_TRIGGER_SCRIPT)

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
            self._page = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
