from __future__ import annotations

import asyncio
import inspect
from enum import Enum
from typing import Awaitable, Callable, Union

Predicate = Callable[[], Union[bool, Awaitable[bool]]]


class WaitOutcome(str, Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"


async def wait_until(predicate: Predicate, *, interval: float, timeout: float) -> WaitOutcome:
    """
    Poll `predicate` until it is truthy or `timeout` seconds have elapsed.

    The first evaluation happens right away. A timeout is reported as
    TIMED_OUT, never raised; callers decide whether it is fatal. Errors raised
    by the predicate propagate.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    while True:
        result = predicate()
        if inspect.isawaitable(result):
            result = await result
        if result:
            return WaitOutcome.SUCCESS

        remaining = deadline - loop.time()
        if remaining <= 0:
            return WaitOutcome.TIMED_OUT
        # Never sleep past the deadline; the last check happens right at it.
        await asyncio.sleep(min(interval, remaining))


async def settle(seconds: float) -> None:
    """Fixed delay after a UI mutation so the host can finish rendering."""
    await asyncio.sleep(max(0.0, seconds))
