from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from inbox_autolabel.config.settings import AutoLabelSettings
from inbox_autolabel.errors import ElementNotFound, FormNotReady
from inbox_autolabel.host.ui import HostUI, Notifier, UiElement
from inbox_autolabel.workflow.poll import WaitOutcome, settle, wait_until


@dataclass(frozen=True)
class CreateResult:
    marker_written: bool
    # Instruction shown to the user for the step left to do by hand.
    handoff: str


class FilterCreator:
    """
    Drives Gmail's "Create a new filter" wizard up to the label picker.

    Picking the label itself stays with the user: the picker has no stable
    affordance to target.
    """

    def __init__(self, ui: HostUI, notifier: Notifier, settings: AutoLabelSettings) -> None:
        self._ui = ui
        self._notifier = notifier
        self._settings = settings

    async def _find_create_button(self) -> Optional[UiElement]:
        sel = self._settings.selectors
        for text in sel.create_filter_texts:
            button = await self._ui.find_clickable(sel.links, text)
            if button is not None:
                return button
        return None

    async def _form_rendered(self) -> bool:
        return await self._ui.count(self._settings.selectors.form_ready) > 0

    async def create(self, sender: str, label_name: str) -> CreateResult:
        sel = self._settings.selectors
        timings = self._settings.timings

        print("[auto-label] Looking for 'Create filter' button...")
        create_btn = await self._find_create_button()
        if create_btn is None:
            raise ElementNotFound("'Create a new filter' button")
        await create_btn.click()
        print("[auto-label] Clicked create filter button")

        outcome = await wait_until(
            self._form_rendered,
            interval=timings.form_poll_interval,
            timeout=timings.form_timeout,
        )
        if outcome is WaitOutcome.TIMED_OUT:
            raise FormNotReady(f"Timeout waiting for form labels after {timings.form_timeout:g}s")

        from_input = await self._ui.find_input_by_label(sel.from_label)
        if from_input is None:
            raise ElementNotFound(f"'{sel.from_label}' input field")
        await from_input.set_value(sender)
        print("[auto-label] Filled in From field")

        # The marker is what lets a later run find this filter again.
        marker_written = False
        doesnt_have = await self._ui.find_input_by_label(sel.doesnt_have_label)
        if doesnt_have is not None:
            await doesnt_have.set_value(self._settings.marker_for(label_name))
            marker_written = True
            print("[auto-label] Added metadata")
        else:
            print(
                f"[WARN] No '{sel.doesnt_have_label}' field; "
                "the new filter will not be recognized on later runs"
            )

        await settle(timings.before_proceed)
        proceed_btn = await self._ui.find_clickable(sel.buttons, sel.proceed_text)
        if proceed_btn is None:
            raise ElementNotFound("proceed button")
        await proceed_btn.click()
        print("[auto-label] Proceeding to actions step...")

        await settle(timings.after_proceed)
        apply_label = await self._ui.find_input_by_label(sel.apply_label_label)
        if apply_label is None:
            raise ElementNotFound(f"'{sel.apply_label_label}' checkbox")
        if not await apply_label.is_checked():
            await apply_label.click()
            print("[auto-label] Checked 'Apply label' checkbox")
            await settle(timings.after_apply_label)

        handoff = (
            "Please:\n"
            f'1. Select the label "{label_name}" from the dropdown\n'
            f'2. Click the "{sel.proceed_text}" button to finish\n'
            "Confirm this message once the filter is saved."
        )
        print(f'[auto-label] NOTE: select the label "{label_name}" manually and click {sel.proceed_text}')
        # Blocks until the user is done, so the wizard is not navigated away from early.
        await self._notifier.alert(handoff)
        return CreateResult(marker_written=marker_written, handoff=handoff)
