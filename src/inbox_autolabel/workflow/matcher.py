from __future__ import annotations

import re
from typing import Optional

from inbox_autolabel.config.settings import AutoLabelSettings
from inbox_autolabel.host.ui import HostUI, UiElement


def contains_marker(text: str, marker: str) -> bool:
    """
    True if `marker` occurs in text as a whole token.

    A plain substring scan would let the marker for "News" match a row that
    carries the marker for "Newsletter" or "News/Archive".
    """
    pattern = re.escape(marker) + r"(?![\w/-])"
    return re.search(pattern, text) is not None


class FilterMatcher:
    """Finds the filter this tool created earlier for a label, by its marker."""

    def __init__(self, ui: HostUI, settings: AutoLabelSettings) -> None:
        self._ui = ui
        self._settings = settings

    async def find_by_label(self, label_name: str) -> Optional[UiElement]:
        marker = self._settings.marker_for(label_name)
        rows = await self._ui.query_all(self._settings.selectors.filter_rows)

        for row in rows:
            if contains_marker(await row.text(), marker):
                return row
        return None
