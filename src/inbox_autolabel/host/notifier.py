from __future__ import annotations

import asyncio
from typing import Callable, Optional


class ConsoleNotifier:
    """Alerts and prompts in the terminal that started the session."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        self._input = input_fn

    async def alert(self, message: str) -> None:
        print(f"\n{message}")
        # Blocks the workflow like a browser alert would, without blocking the event loop.
        try:
            await asyncio.to_thread(self._input, "Press Enter to continue... ")
        except EOFError:
            # No terminal to wait on; treat the message as acknowledged.
            return

    async def prompt(self, message: str) -> Optional[str]:
        print(f"\n{message}")
        try:
            return await asyncio.to_thread(self._input, "> ")
        except EOFError:
            # Closed stdin counts as a cancelled prompt.
            return None
