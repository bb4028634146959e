# src/inbox_autolabel/app/run.py
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, Callable

from playwright.async_api import ElementHandle

from inbox_autolabel.config.paths import LOGS_DIR, PROFILE_DIR
from inbox_autolabel.config.settings import AutoLabelSettings, load_settings
from inbox_autolabel.errors import HostOperationFailed
from inbox_autolabel.host.browser import GmailBrowser, GmailBrowserConfig
from inbox_autolabel.host.notifier import ConsoleNotifier
from inbox_autolabel.host.playwright_ui import PlaywrightHostUI, capture_origin
from inbox_autolabel.host.ui import HostUI, Notifier
from inbox_autolabel.models import WorkflowOutcome, WorkflowResult
from inbox_autolabel.workflow.orchestrator import run_auto_label_workflow

RESULTS_FILE = "autolabel.jsonl"


@dataclass
class SessionSummary:
    runs: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    noop: int = 0
    failed: int = 0

    def record(self, result: WorkflowResult) -> None:
        self.runs += 1
        if result.outcome is WorkflowOutcome.CREATED:
            self.created += 1
        elif result.outcome is WorkflowOutcome.UPDATED:
            self.updated += 1
        elif result.outcome is WorkflowOutcome.UNCHANGED:
            self.unchanged += 1
        elif result.outcome is WorkflowOutcome.NOOP:
            self.noop += 1
        else:
            self.failed += 1


def browser_config(settings: AutoLabelSettings, profile_dir: Path = PROFILE_DIR) -> GmailBrowserConfig:
    return GmailBrowserConfig(
        profile_dir=profile_dir,
        gmail_url=settings.gmail_url,
        headless=settings.headless,
        channel=settings.browser_channel,
    )


def result_payload(result: WorkflowResult) -> Dict[str, Any]:
    payload = asdict(result)
    payload["state"] = result.state.value
    payload["outcome"] = result.outcome.value
    return payload


def append_result(logs_dir: Path, result: WorkflowResult) -> None:
    # One JSON line per run; the host application stays the source of truth.
    logs_dir.mkdir(parents=True, exist_ok=True)
    record = {"at": datetime.now(timezone.utc).isoformat(), **result_payload(result)}
    with (logs_dir / RESULTS_FILE).open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


async def handle_trigger(
    handle: ElementHandle,
    *,
    ui: HostUI,
    notifier: Notifier,
    settings: AutoLabelSettings,
    progress_cb: Optional[Callable[[str, Dict[str, Any]], None]] = None,
) -> WorkflowResult:
    sel = settings.selectors
    try:
        origin = await capture_origin(
            handle,
            selectors=[f"[{sel.email_attribute}]", sel.sender_display],
            attribute_names=[sel.email_attribute],
            max_levels=settings.max_ancestor_levels,
        )
    except HostOperationFailed as exc:
        # Gmail may have re-rendered the message already; the workflow reports the missing sender.
        print(f"[WARN] {exc}")
        origin = None

    return await run_auto_label_workflow(
        origin,
        ui=ui,
        notifier=notifier,
        settings=settings,
        progress_cb=progress_cb,
    )


async def _next_trigger(
    triggers: "asyncio.Queue[ElementHandle]", stop_event: asyncio.Event
) -> Optional[ElementHandle]:
    get_task = asyncio.ensure_future(triggers.get())
    stop_task = asyncio.ensure_future(stop_event.wait())
    done, pending = await asyncio.wait({get_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()
    if get_task in done:
        return get_task.result()
    return None


async def run_session(
    *,
    settings: Optional[AutoLabelSettings] = None,
    notifier: Optional[Notifier] = None,
    logs_dir: Path = LOGS_DIR,
    stop_event: Optional[asyncio.Event] = None,
    verbose: bool = True,
    progress_cb: Optional[Callable[[str, Dict[str, Any]], None]] = None,
) -> Dict[str, Any]:
    """
    Open Gmail, install the "Auto-Label Sender" menu entry and serve triggers
    until `stop_event` is set or the Gmail tab is closed.

    Triggers are handled one after another; two workflows never share the page.

    Returns:
        dict summary (JSON-serializable).
    """
    def log(msg: str) -> None:
        if verbose:
            print(msg)

    def report(
        step: str,
        *,
        detail: str | None = None,
        metrics: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> None:
        if not progress_cb:
            return
        # Normalize the payload shape for both UI and CLI consumers.
        payload: Dict[str, Any] = {"detail": detail}
        if metrics:
            payload["metrics"] = metrics
        if extra:
            payload.update(extra)
        progress_cb(step, payload)

    settings = settings or load_settings()
    notifier = notifier or ConsoleNotifier()
    stop_event = stop_event or asyncio.Event()
    summary = SessionSummary()
    triggers: "asyncio.Queue[ElementHandle]" = asyncio.Queue()

    # --- Browser ---
    report("connect_browser", detail="Opening Gmail")
    browser = GmailBrowser(browser_config(settings))
    try:
        await browser.connect()
        browser.page.on("close", lambda _page: stop_event.set())
        ui = PlaywrightHostUI(browser.page)
        await browser.install_trigger(triggers.put)

        log("[auto-label] Ready: right-click a message and choose 'Auto-Label Sender'")
        report("ready", detail="Waiting for a right-click on a message", metrics=asdict(summary))

        # --- Serve triggers ---
        while not stop_event.is_set():
            handle = await _next_trigger(triggers, stop_event)
            if handle is None:
                break

            result = await handle_trigger(
                handle,
                ui=ui,
                notifier=notifier,
                settings=settings,
                progress_cb=progress_cb,
            )
            summary.record(result)
            append_result(logs_dir, result)
            log(f"[run] {result.outcome.value}: {result.message or result.reason or ''}")

            if result.outcome is WorkflowOutcome.FAILED:
                report(
                    "error",
                    detail=result.message,
                    metrics=asdict(summary),
                    error=result_payload(result),
                )
            else:
                report(
                    "ready",
                    detail=result.message or "Waiting for a right-click on a message",
                    metrics=asdict(summary),
                    result=result_payload(result),
                )
    finally:
        await browser.close()

    report("done", detail="Session closed", metrics=asdict(summary))
    return asdict(summary)
