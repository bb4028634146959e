from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WorkflowState(str, Enum):
    IDLE = "idle"
    EXTRACTING_SENDER = "extracting_sender"
    AWAITING_LABEL_INPUT = "awaiting_label_input"
    NAVIGATING = "navigating"
    MATCHING = "matching"
    CREATING = "creating"
    UPDATING = "updating"
    RESTORING = "restoring"
    DONE = "done"
    FAILED = "failed"


class WorkflowOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    # Sender was already part of the matched filter.
    UNCHANGED = "unchanged"
    # Label prompt was cancelled or left blank.
    NOOP = "noop"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkflowRequest:
    sender: str
    label: str

    def __post_init__(self) -> None:
        if not self.sender:
            raise ValueError("WorkflowRequest requires a sender")
        if not self.label or self.label != self.label.strip():
            raise ValueError("WorkflowRequest requires a trimmed, non-empty label")


@dataclass(frozen=True)
class WorkflowResult:
    state: WorkflowState
    outcome: WorkflowOutcome
    sender: Optional[str] = None
    label: Optional[str] = None
    message: str = ""
    reason: Optional[str] = None


def normalize_label(raw: Optional[str]) -> Optional[str]:
    """Trim user input; None means the prompt was cancelled or left blank."""
    if raw is None:
        return None
    label = raw.strip()
    return label or None
