from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from time import time
from typing import Any, Dict, Optional, List


@dataclass
class SessionStatus:
    state: str = "idle"
    # Last session step or workflow state (e.g. "navigating", "creating").
    step: str = "idle"
    detail: Optional[str] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
    summary: Optional[Dict[str, Any]] = None
    recent_results: List[Dict[str, Any]] = field(default_factory=list)
    # Keep a small rolling window of recent errors for UI visibility.
    recent_errors: List[Dict[str, Any]] = field(default_factory=list)
    # Question or message the running workflow is waiting on.
    pending: Optional[Dict[str, Any]] = None
    updated_at: float = field(default_factory=time)


class SessionStatusStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._status = SessionStatus()

    def update(self, **fields: Any) -> None:
        # Lock ensures UI polling sees consistent snapshots across threads.
        with self._lock:
            for key, value in fields.items():
                if hasattr(self._status, key):
                    setattr(self._status, key, value)
            self._status.updated_at = time()

    def push(self, key: str, item: Dict[str, Any], limit: int = 50) -> None:
        # Newest first, capped to keep memory/response size bounded.
        with self._lock:
            current = getattr(self._status, key)
            setattr(self._status, key, ([item] + current)[:limit])
            self._status.updated_at = time()

    def reset(self) -> None:
        with self._lock:
            self._status = SessionStatus()

    def snapshot(self) -> Dict[str, Any]:
        # Return a copy to avoid mutation by callers.
        with self._lock:
            return {
                "state": self._status.state,
                "step": self._status.step,
                "detail": self._status.detail,
                "metrics": dict(self._status.metrics),
                "summary": self._status.summary,
                "recent_results": list(self._status.recent_results),
                "recent_errors": list(self._status.recent_errors),
                "pending": dict(self._status.pending) if self._status.pending else None,
                "updated_at": self._status.updated_at,
            }


session_status_store = SessionStatusStore()
