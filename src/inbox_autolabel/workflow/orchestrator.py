from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from inbox_autolabel.config.settings import AutoLabelSettings
from inbox_autolabel.errors import AutoLabelError, FailureReason, NoSenderDetected
from inbox_autolabel.extractors.sender import default_strategies, extract_sender
from inbox_autolabel.host.ui import HostUI, Notifier, UiNode
from inbox_autolabel.models import (
    WorkflowOutcome,
    WorkflowRequest,
    WorkflowResult,
    WorkflowState,
    normalize_label,
)
from inbox_autolabel.workflow.creator import FilterCreator
from inbox_autolabel.workflow.matcher import FilterMatcher
from inbox_autolabel.workflow.navigation import NavigationController
from inbox_autolabel.workflow.updater import FilterUpdater

ProgressCallback = Callable[[str, Dict[str, Any]], None]

NO_SENDER_MESSAGE = "Could not detect sender email. Please try right-clicking directly on the email."


class AutoLabelWorkflow:
    """
    One "Auto-Label Sender" run, from the clicked node to a created/updated filter.

    idle -> extracting_sender -> awaiting_label_input -> navigating -> matching
    -> creating | updating -> restoring -> done, with failed reachable from any
    state. Nothing escapes `run`: failures end up as an alert and a result.
    """

    def __init__(
        self,
        ui: HostUI,
        notifier: Notifier,
        settings: Optional[AutoLabelSettings] = None,
        progress_cb: Optional[ProgressCallback] = None,
    ) -> None:
        self.settings = settings or AutoLabelSettings()
        self.state = WorkflowState.IDLE
        self._ui = ui
        self._notifier = notifier
        self._progress_cb = progress_cb
        self._navigation = NavigationController(ui, self.settings)
        self._matcher = FilterMatcher(ui, self.settings)
        self._creator = FilterCreator(ui, notifier, self.settings)
        self._updater = FilterUpdater(ui, self.settings)

    def _enter(self, state: WorkflowState, *, detail: Optional[str] = None, **extra: Any) -> None:
        self.state = state
        if not self._progress_cb:
            return
        payload: Dict[str, Any] = {"detail": detail}
        if extra:
            payload.update(extra)
        self._progress_cb(state.value, payload)

    def _extract(self, origin: Optional[UiNode]) -> str:
        sel = self.settings.selectors
        if origin is None:
            print("[ERROR] No element was right-clicked")
            raise NoSenderDetected(NO_SENDER_MESSAGE)

        sender = extract_sender(
            origin,
            max_levels=self.settings.max_ancestor_levels,
            strategies=default_strategies(
                email_attribute=sel.email_attribute,
                sender_display=sel.sender_display,
            ),
        )
        if not sender:
            print("[ERROR] Could not detect sender email")
            raise NoSenderDetected(NO_SENDER_MESSAGE)
        return sender

    async def _apply(self, request: WorkflowRequest) -> WorkflowOutcome:
        async with self._navigation.filter_settings(
            before_restore=lambda: self._enter(WorkflowState.RESTORING, detail="Restoring original view")
        ):
            self._enter(WorkflowState.MATCHING, detail=f"Looking for filter of label {request.label!r}")
            existing = await self._matcher.find_by_label(request.label)

            if existing is not None:
                print("[auto-label] Found existing filter, updating...")
                self._enter(WorkflowState.UPDATING, detail="Updating existing filter")
                result = await self._updater.update(existing, request.sender)
                return WorkflowOutcome.UPDATED if result.changed else WorkflowOutcome.UNCHANGED

            print("[auto-label] Creating new filter...")
            self._enter(WorkflowState.CREATING, detail="Creating new filter")
            await self._creator.create(request.sender, request.label)
            return WorkflowOutcome.CREATED

    async def run(self, origin: Optional[UiNode]) -> WorkflowResult:
        sender: Optional[str] = None
        label: Optional[str] = None
        try:
            self._enter(WorkflowState.EXTRACTING_SENDER, detail="Extracting sender")
            sender = self._extract(origin)
            print(f"[auto-label] Found sender: {sender}")

            self._enter(WorkflowState.AWAITING_LABEL_INPUT, detail="Waiting for label name", sender=sender)
            label = normalize_label(
                await self._notifier.prompt(
                    f"Enter the label name to auto-apply for emails from:\n{sender}"
                )
            )
            if label is None:
                print("[auto-label] User cancelled or entered empty label name")
                self._enter(WorkflowState.DONE, detail="Cancelled", outcome=WorkflowOutcome.NOOP.value)
                return WorkflowResult(
                    state=self.state,
                    outcome=WorkflowOutcome.NOOP,
                    sender=sender,
                    reason=FailureReason.EMPTY_LABEL.value,
                )

            request = WorkflowRequest(sender=sender, label=label)
            print(f'[auto-label] Creating filter for {sender} with label "{label}"')
            self._enter(WorkflowState.NAVIGATING, detail="Opening filter settings")
            outcome = await self._apply(request)

        except Exception as exc:
            if isinstance(exc, AutoLabelError):
                reason, message = exc.reason, exc.message
            else:
                reason, message = FailureReason.HOST_OPERATION_FAILED, f"{type(exc).__name__}: {exc}"
            print(f"[ERROR] Filter operation failed ({reason.value}): {message}")
            self._enter(WorkflowState.FAILED, detail=message, reason=reason.value)

            if reason is FailureReason.NO_SENDER_DETECTED:
                text = message
            else:
                text = f"Failed to create filter: {message}"
            await self._notify(text)
            return WorkflowResult(
                state=self.state,
                outcome=WorkflowOutcome.FAILED,
                sender=sender,
                label=label,
                message=text,
                reason=reason.value,
            )

        if outcome is WorkflowOutcome.UNCHANGED:
            text = f'{sender} is already in the filter for label "{label}"'
        else:
            text = f'✓ Added filter for {sender} with label "{label}"'
        print(f"[auto-label] Filter {outcome.value} successfully")
        self._enter(WorkflowState.DONE, detail=text, outcome=outcome.value)
        await self._notify(text)
        return WorkflowResult(
            state=self.state,
            outcome=outcome,
            sender=sender,
            label=label,
            message=text,
        )

    async def _notify(self, text: str) -> None:
        try:
            await self._notifier.alert(text)
        except Exception as exc:
            # The outcome is already settled; a broken notifier must not turn it into a crash.
            print(f"[ERROR] Could not show message: {type(exc).__name__}: {exc}")


async def run_auto_label_workflow(
    origin: Optional[UiNode],
    *,
    ui: HostUI,
    notifier: Notifier,
    settings: Optional[AutoLabelSettings] = None,
    progress_cb: Optional[ProgressCallback] = None,
) -> WorkflowResult:
    """Entry point for one user trigger on a message element."""
    workflow = AutoLabelWorkflow(ui, notifier, settings=settings, progress_cb=progress_cb)
    return await workflow.run(origin)
