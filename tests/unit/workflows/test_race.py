import asyncio
from datetime import timedelta

import pytest

from onboardflow.workflows.race import Race, RaceWinner


class ScriptedWait:
    """Stands in for workflow.wait_condition: runs ``on_wait`` then times out or returns."""

    def __init__(self, on_wait=None, time_out=True):
        self.on_wait = on_wait
        self.time_out = time_out
        self.calls = []

    async def __call__(self, fn, *, timeout):
        self.calls.append(timeout)
        if self.on_wait:
            self.on_wait()
        if self.time_out:
            raise asyncio.TimeoutError()


@pytest.mark.asyncio
async def test_already_signalled_does_not_wait():
    wait = ScriptedWait()

    winner = await Race(wait)(lambda: True, timedelta(seconds=10))

    assert winner == RaceWinner.SIGNAL
    assert wait.calls == []


@pytest.mark.asyncio
async def test_timer_wins_without_signal():
    wait = ScriptedWait()

    winner = await Race(wait)(lambda: False, timedelta(seconds=10))

    assert winner == RaceWinner.TIMER
    assert wait.calls == [timedelta(seconds=10)]


@pytest.mark.asyncio
async def test_signal_before_timer():
    flags = {"filled": False}
    wait = ScriptedWait(on_wait=lambda: flags.update(filled=True), time_out=False)

    winner = await Race(wait)(lambda: flags["filled"], timedelta(seconds=10))

    assert winner == RaceWinner.SIGNAL


@pytest.mark.asyncio
async def test_signal_wins_tie_with_timer():
    # The signal lands in the same instant the timer fires.
    flags = {"filled": False}
    wait = ScriptedWait(on_wait=lambda: flags.update(filled=True), time_out=True)

    winner = await Race(wait)(lambda: flags["filled"], timedelta(seconds=10))

    assert winner == RaceWinner.SIGNAL


@pytest.mark.asyncio
async def test_cancellation_predicate():
    flags = {"cancelled": False}
    wait = ScriptedWait(on_wait=lambda: flags.update(cancelled=True), time_out=False)

    winner = await Race(wait)(lambda: False, timedelta(seconds=10), cancelled=lambda: flags["cancelled"])

    assert winner == RaceWinner.CANCELLED


@pytest.mark.asyncio
async def test_signal_takes_precedence_over_cancellation():
    winner = await Race(ScriptedWait())(lambda: True, timedelta(seconds=1), cancelled=lambda: True)

    assert winner == RaceWinner.SIGNAL


@pytest.mark.asyncio
async def test_race_with_asyncio_wait():
    async def asyncio_wait_condition(fn, *, timeout):
        async def poll():
            while not fn():
                await asyncio.sleep(0.001)

        await asyncio.wait_for(poll(), timeout.total_seconds())

    event = asyncio.Event()
    race = Race(asyncio_wait_condition)

    asyncio.get_running_loop().call_later(0.01, event.set)
    assert await race(event.is_set, timedelta(seconds=5)) == RaceWinner.SIGNAL
    assert await race(lambda: False, timedelta(milliseconds=20)) == RaceWinner.TIMER
