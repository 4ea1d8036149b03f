"""
Race a signal predicate against a timer.

Temporal's ``workflow.wait_condition`` only reports "condition met" or
"timed out". ``Race`` turns that into an explicit winner and breaks ties in
favour of the signal: the predicate is checked again after the timer fires,
so a signal applied in the same instant as the timeout still wins.
"""

import asyncio
from datetime import timedelta
from enum import Enum
from typing import Awaitable, Callable, Optional

from temporalio import workflow

Predicate = Callable[[], bool]
WaitCondition = Callable[..., Awaitable[None]]


class RaceWinner(str, Enum):
    SIGNAL = "SIGNAL"
    TIMER = "TIMER"
    CANCELLED = "CANCELLED"


class Race:
    def __init__(self, wait_condition: Optional[WaitCondition] = None):
        # Resolved lazily so the module imports cleanly outside a workflow.
        self._wait_condition = wait_condition

    async def __call__(
        self,
        signalled: Predicate,
        timeout: timedelta,
        *,
        cancelled: Optional[Predicate] = None,
    ) -> RaceWinner:
        """
        Wait until ``signalled`` holds, ``cancelled`` holds, or ``timeout`` elapses.

        Precedence on ties is signal, then cancellation, then timer.
        """

        def resolved() -> bool:
            return signalled() or (cancelled is not None and cancelled())

        if not resolved():
            wait_condition = self._wait_condition or workflow.wait_condition
            try:
                await wait_condition(resolved, timeout=timeout)
            except asyncio.TimeoutError:
                pass

        if signalled():
            return RaceWinner.SIGNAL
        if cancelled is not None and cancelled():
            return RaceWinner.CANCELLED
        return RaceWinner.TIMER
