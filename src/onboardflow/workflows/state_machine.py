"""
Onboarding state machine.

Drives one employee from the welcome email to either a thank-you email
(``COMPLETED``) or an exhausted reminder loop (``ESCALATED_UNRESOLVED``).
The machine performs no I/O itself: side effects go through an
``ActivityPort`` and every suspension goes through a race of "form filled"
against a timer, so the same code runs inside a Temporal workflow and in
plain unit tests.
"""

from datetime import timedelta
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Tuple

from onboardflow.platform.logging import get_logger
from onboardflow.workflows.errors import InvalidTransitionError, OnboardingCancelledError
from onboardflow.workflows.models import OnboardingPhase, OnboardingState
from onboardflow.workflows.race import RaceWinner


class TransitionEvent(str, Enum):
    FORM_FILLED = "FORM_FILLED"
    DEADLINE_EXPIRED = "DEADLINE_EXPIRED"
    INTERVAL_EXPIRED = "INTERVAL_EXPIRED"
    REMINDERS_EXHAUSTED = "REMINDERS_EXHAUSTED"


TRANSITIONS: Dict[Tuple[OnboardingPhase, TransitionEvent], OnboardingPhase] = {
    (OnboardingPhase.AWAITING_FORM, TransitionEvent.FORM_FILLED): OnboardingPhase.COMPLETED,
    (OnboardingPhase.AWAITING_FORM, TransitionEvent.DEADLINE_EXPIRED): OnboardingPhase.REMINDING,
    (OnboardingPhase.REMINDING, TransitionEvent.FORM_FILLED): OnboardingPhase.COMPLETED,
    (OnboardingPhase.REMINDING, TransitionEvent.INTERVAL_EXPIRED): OnboardingPhase.REMINDING,
    (OnboardingPhase.REMINDING, TransitionEvent.REMINDERS_EXHAUSTED): OnboardingPhase.ESCALATED_UNRESOLVED,
}


def next_phase(phase: OnboardingPhase, event: TransitionEvent) -> OnboardingPhase:
    try:
        return TRANSITIONS[(phase, event)]
    except KeyError:
        raise InvalidTransitionError(phase, event) from None


class ActivityPort(Protocol):
    """Side-effecting operations the state machine awaits."""

    async def send_welcome_email(self, state: OnboardingState) -> OnboardingState: ...

    async def send_thankyou_email(self, state: OnboardingState) -> OnboardingState: ...

    async def send_reminder_email(self, state: OnboardingState) -> OnboardingState: ...

    async def create_or_update_follow_up_task(self, state: OnboardingState) -> OnboardingState: ...

    async def complete_follow_up_task(self, state: OnboardingState) -> OnboardingState: ...


RaceFn = Callable[..., Awaitable[RaceWinner]]
Operation = Callable[[OnboardingState], Awaitable[OnboardingState]]


class OnboardingStateMachine:
    """
    Control loop for a single onboarding.

    ``notify_form_filled`` is the only external writer. It records a pending
    event which is merged into every activity result, so a signal delivered
    while an activity is in flight is never lost when the activity returns
    its copy of the state.
    """

    def __init__(self, activities: ActivityPort, race: RaceFn, logger=None):
        self._activities = activities
        self._race = race
        self._logger = logger or get_logger(__name__)
        self._state: Optional[OnboardingState] = None
        self._form_filled_pending = False
        self.transitions: List[Tuple[OnboardingPhase, TransitionEvent, OnboardingPhase]] = []

    @property
    def state(self) -> Optional[OnboardingState]:
        """Current snapshot, or None before ``run`` has been entered."""
        return self._state

    def notify_form_filled(self) -> None:
        if self._state is not None and self._state.phase.is_terminal:
            self._logger.info("Ignoring form filled notification, onboarding already %s", self._state.phase.value)
            return
        self._form_filled_pending = True
        if self._state is not None and not self._state.form_filled:
            self._state = self._state.evolve(form_filled=True)

    async def run(self, initial: OnboardingState) -> OnboardingState:
        self._state = initial
        if self._form_filled_pending and not initial.form_filled:
            self._state = initial.evolve(form_filled=True)

        if self._state.phase.is_terminal:
            self._logger.info("Onboarding for %s already finished as %s", initial.employee.email, self._state.phase.value)
            return self._state

        await self._call(self._activities.send_welcome_email)
        self._logger.info("Welcome email sent to %s", self._state.employee.email)

        if self._form_filled():
            return await self._complete()

        if self._state.phase == OnboardingPhase.AWAITING_FORM and self._state.reminders_sent == 0:
            winner = await self._wait(self._state.form_fill_deadline)
            if winner == RaceWinner.SIGNAL:
                return await self._complete()
            self._logger.info("Form fill deadline of %s expired for %s", self._state.form_fill_deadline, self._state.employee.email)

        if self._state.phase == OnboardingPhase.AWAITING_FORM:
            self._transition(TransitionEvent.DEADLINE_EXPIRED)
        return await self._remind(resume=self._state.reminders_sent > 0)

    async def _remind(self, resume: bool) -> OnboardingState:
        # On resume the last reminder was already sent; only the task sync and
        # the interval wait are repeated.
        while True:
            if not resume:
                await self._call(self._activities.send_reminder_email)
                self._logger.info(
                    "Reminder %d of %d sent to %s",
                    self._state.reminders_sent,
                    self._state.reminder_limit,
                    self._state.employee.email,
                )
            resume = False

            await self._call(self._activities.create_or_update_follow_up_task)
            task = self._state.follow_up_task
            self._logger.info("Follow-up task %s is %s / %s", task.id, task.priority.value, task.status.value)

            winner = await self._wait(self._state.reminder_interval)
            if winner == RaceWinner.SIGNAL:
                return await self._complete()

            if self._state.reminders_sent >= self._state.reminder_limit:
                self._transition(TransitionEvent.REMINDERS_EXHAUSTED)
                self._logger.warning(
                    "Reminders exhausted for %s after %d reminders",
                    self._state.employee.email,
                    self._state.reminders_sent,
                )
                return self._state
            self._transition(TransitionEvent.INTERVAL_EXPIRED)

    async def _complete(self) -> OnboardingState:
        self._logger.info("Employee %s filled the onboarding form", self._state.employee.email)
        await self._call(self._activities.complete_follow_up_task)
        await self._call(self._activities.send_thankyou_email)
        if self._state.phase != OnboardingPhase.COMPLETED:
            self._transition(TransitionEvent.FORM_FILLED)
        return self._state

    async def _wait(self, timeout: timedelta) -> RaceWinner:
        winner = await self._race(self._form_filled, timeout)
        if winner == RaceWinner.CANCELLED:
            raise OnboardingCancelledError(f"Onboarding for {self._state.employee.email} was cancelled")
        return winner

    async def _call(self, operation: Operation) -> None:
        result = await operation(self._state)
        if self._form_filled_pending and not result.form_filled:
            result = result.evolve(form_filled=True)
        self._state = result

    def _form_filled(self) -> bool:
        return self._form_filled_pending or (self._state is not None and self._state.form_filled)

    def _transition(self, event: TransitionEvent) -> None:
        current = self._state.phase
        target = next_phase(current, event)
        self._state = self._state.evolve(phase=target)
        self.transitions.append((current, event, target))
        self._logger.info("Onboarding transition %s --%s--> %s", current.value, event.value, target.value)
