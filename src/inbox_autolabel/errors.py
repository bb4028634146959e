from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    NO_SENDER_DETECTED = "NoSenderDetected"
    # Cancelled/blank label prompt. Ends the run silently, never reported as an error.
    EMPTY_LABEL = "EmptyLabel"
    ELEMENT_NOT_FOUND = "ElementNotFound"
    FORM_NOT_READY = "FormNotReady"
    # Non-fatal: the workflow proceeds on a partially rendered settings view.
    NAVIGATION_TIMEOUT = "NavigationTimeout"
    HOST_OPERATION_FAILED = "HostOperationFailed"


class AutoLabelError(Exception):
    """Base class for failures that abort one workflow run."""

    reason: FailureReason = FailureReason.HOST_OPERATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoSenderDetected(AutoLabelError):
    reason = FailureReason.NO_SENDER_DETECTED


class ElementNotFound(AutoLabelError):
    reason = FailureReason.ELEMENT_NOT_FOUND

    def __init__(self, what: str) -> None:
        super().__init__(f"Could not find {what}")
        self.what = what


class FormNotReady(AutoLabelError):
    reason = FailureReason.FORM_NOT_READY


class HostOperationFailed(AutoLabelError):
    reason = FailureReason.HOST_OPERATION_FAILED
