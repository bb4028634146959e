from __future__ import annotations

import asyncio
from typing import Optional

from backend.app.status import SessionStatusStore


class ApiNotifier:
    """
    Notifier for sessions started over HTTP.

    Alerts and prompts are published as `pending` in the status store and
    resolved by POST /api/session/reply. After `cancel()` every alert is
    acknowledged and every prompt cancelled right away, until `reset()`.
    """

    def __init__(self, store: SessionStatusStore) -> None:
        self._store = store
        self._waiting: Optional[asyncio.Future] = None
        self._cancelled = False

    async def alert(self, message: str) -> None:
        await self._ask("alert", message)

    async def prompt(self, message: str) -> Optional[str]:
        return await self._ask("prompt", message)

    async def _ask(self, kind: str, message: str) -> Optional[str]:
        if self._cancelled:
            print(f"[auto-label] Session stopping, skipped {kind}: {message}")
            return None
        self._waiting = asyncio.get_running_loop().create_future()
        self._store.update(pending={"kind": kind, "message": message})
        try:
            return await self._waiting
        finally:
            self._waiting = None
            self._store.update(pending=None)

    @property
    def waiting(self) -> bool:
        return self._waiting is not None and not self._waiting.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def reply(self, text: Optional[str]) -> bool:
        if not self.waiting:
            return False
        self._waiting.set_result(text)
        return True

    def cancel(self) -> None:
        # An unanswered prompt counts as cancelled; an alert as acknowledged.
        self._cancelled = True
        self.reply(None)

    def reset(self) -> None:
        self._cancelled = False
