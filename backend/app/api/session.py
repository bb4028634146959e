from __future__ import annotations

import asyncio
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from backend.app.notifier import ApiNotifier
from backend.app.status import session_status_store
from inbox_autolabel.app.run import run_session
from inbox_autolabel.config.settings import AutoLabelSettings, load_settings

router = APIRouter()
notifier = ApiNotifier(session_status_store)


class ReplyRequest(BaseModel):
    # None or blank cancels a prompt; any value acknowledges an alert.
    text: Optional[str] = None


class SessionRunner:
    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, settings: AutoLabelSettings) -> None:
        notifier.reset()
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(settings, self._stop_event))

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        # Unblock a workflow that is waiting on the user.
        notifier.cancel()

    async def _run(self, settings: AutoLabelSettings, stop_event: asyncio.Event) -> None:
        try:
            summary = await run_session(
                settings=settings,
                notifier=notifier,
                stop_event=stop_event,
                verbose=False,
                progress_cb=progress_cb,
            )
        except Exception as exc:
            # Nobody awaits this task; the status store is where the failure surfaces.
            print(f"[ERROR] Session failed: {type(exc).__name__}: {exc}")
            session_status_store.update(state="error", step="error", detail=f"{type(exc).__name__}: {exc}")
            return

        session_status_store.update(
            state="done",
            step="done",
            detail="Session closed",
            summary=summary,
            metrics=summary,
        )


runner = SessionRunner()


def progress_cb(step: str, event: dict[str, Any]) -> None:
    status_update: dict[str, Any] = {
        "state": "running",
        "step": step,
        "detail": event.get("detail"),
    }
    if "metrics" in event:
        status_update["metrics"] = event.get("metrics") or {}
    session_status_store.update(**status_update)

    result = event.get("result")
    if result:
        session_status_store.push("recent_results", result)

    error = event.get("error")
    if error:
        session_status_store.push("recent_errors", error)


@router.post("/session/start")
async def start_session() -> dict:
    if runner.running:
        raise HTTPException(status_code=409, detail="A session is already running.")
    try:
        settings = load_settings()
    except RuntimeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    session_status_store.reset()
    session_status_store.update(state="running", step="starting", detail="Starting session")
    runner.start(settings)
    return {"ok": True}


@router.post("/session/stop")
async def stop_session() -> dict:
    if not runner.running:
        raise HTTPException(status_code=409, detail="No session is running.")
    runner.stop()
    session_status_store.update(detail="Stopping session")
    return {"ok": True}


@router.post("/session/reply")
async def reply(body: ReplyRequest) -> dict:
    if not notifier.reply(body.text):
        raise HTTPException(status_code=409, detail="Nothing is waiting for a reply.")
    return {"ok": True}


@router.get("/session/status")
async def session_status() -> dict:
    return {"ok": True, "running": runner.running, "status": session_status_store.snapshot()}
