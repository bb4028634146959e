from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from inbox_autolabel.config.settings import AutoLabelSettings
from inbox_autolabel.errors import FailureReason
from inbox_autolabel.host.ui import HostUI
from inbox_autolabel.workflow.poll import WaitOutcome, settle, wait_until


class NavigationController:
    """Moves Gmail to the filter settings and back to where the user was."""

    def __init__(self, ui: HostUI, settings: AutoLabelSettings) -> None:
        self._ui = ui
        self._settings = settings

    async def _settings_rendered(self) -> bool:
        return await self._ui.count(self._settings.selectors.settings_marker) > 0

    async def goto_filter_settings(self) -> WaitOutcome:
        timings = self._settings.timings
        print("[auto-label] Navigating to filters settings...")
        await self._ui.set_location(self._settings.filters_location)

        outcome = await wait_until(
            self._settings_rendered,
            interval=timings.settings_poll_interval,
            timeout=timings.settings_timeout,
        )
        if outcome is WaitOutcome.SUCCESS:
            # The filter list renders progressively after the marker shows up.
            await settle(timings.settings_settle)
        else:
            # Partial renders are common; later lookups report their own failures.
            print(
                f"[WARN] {FailureReason.NAVIGATION_TIMEOUT.value}: settings view not detected "
                f"after {timings.settings_timeout:g}s, continuing anyway"
            )
        return outcome

    async def restore(self, location: str) -> None:
        await self._ui.set_location(location)

    @asynccontextmanager
    async def filter_settings(
        self, before_restore: Optional[Callable[[], None]] = None
    ) -> AsyncIterator[WaitOutcome]:
        """
        Visit the filter settings for the duration of the block.
        The original location is restored on every exit path.
        """
        original = await self._ui.get_location()
        block_failed = False
        try:
            yield await self.goto_filter_settings()
        except BaseException:
            block_failed = True
            raise
        finally:
            if before_restore:
                try:
                    before_restore()
                except Exception as exc:
                    print(f"[WARN] before_restore callback failed: {type(exc).__name__}: {exc}")
            try:
                await self.restore(original)
            except Exception as exc:
                if not block_failed:
                    raise
                # Keep the error of the block itself; a failed restore only gets logged.
                print(f"[ERROR] Could not restore location {original!r}: {type(exc).__name__}: {exc}")
