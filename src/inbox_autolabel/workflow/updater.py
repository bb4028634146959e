from __future__ import annotations

from dataclasses import dataclass

from inbox_autolabel.config.settings import AutoLabelSettings
from inbox_autolabel.errors import ElementNotFound
from inbox_autolabel.host.ui import HostUI, UiElement
from inbox_autolabel.workflow.poll import settle

SENDER_SEPARATOR = " | "


@dataclass(frozen=True)
class UpdateResult:
    changed: bool
    from_value: str


def append_sender(current: str, sender: str) -> str:
    # Gmail reads "a | b" in the From criterion as "a OR b".
    if not current.strip():
        return sender
    return f"{current}{SENDER_SEPARATOR}{sender}"


class FilterUpdater:
    def __init__(self, ui: HostUI, settings: AutoLabelSettings) -> None:
        self._ui = ui
        self._settings = settings

    async def update(self, rule_row: UiElement, sender: str) -> UpdateResult:
        """Add `sender` to the From criterion of an existing filter, once."""
        sel = self._settings.selectors
        timings = self._settings.timings

        await rule_row.click()
        await settle(timings.after_open_rule)

        from_input = await self._ui.find_input_by_label(sel.from_label)
        if from_input is None:
            raise ElementNotFound(f"'{sel.from_label}' input field")

        current = await from_input.value()
        if sender in current:
            print("[auto-label] Sender already in filter")
            cancel_btn = await self._ui.find_clickable(sel.buttons, sel.cancel_text)
            if cancel_btn is not None:
                await cancel_btn.click()
            return UpdateResult(changed=False, from_value=current)

        new_value = append_sender(current, sender)
        await from_input.set_value(new_value)
        print("[auto-label] Appended sender to filter")

        await settle(timings.after_append_sender)
        update_btn = await self._ui.find_clickable(sel.buttons, sel.update_text)
        if update_btn is None:
            raise ElementNotFound(f"'{sel.update_text}' button")
        await update_btn.click()
        print("[auto-label] Clicked Update filter button")
        await settle(timings.after_update)

        return UpdateResult(changed=True, from_value=new_value)
