import asyncio
from typing import Optional

from temporalio import activity
from temporalio.exceptions import ApplicationError

from onboardflow.integrations.email.service import (
    REMINDER_SUBJECT,
    THANKYOU_SUBJECT,
    WELCOME_SUBJECT,
    EmailService,
    reminder_body,
    thankyou_body,
    welcome_body,
)
from onboardflow.integrations.tasks.service import FollowUpTaskService
from onboardflow.workflows.models import FollowUpStatus, OnboardingState, priority_for_reminders


def follow_up_task_name(state: OnboardingState) -> str:
    employee = state.employee
    return f"Remind {employee.full_name} ({employee.email}) to fill the New Employee form"


class OnboardingActivities:
    """
    Side-effecting onboarding steps.

    Every activity takes the full workflow state and returns an updated copy.
    The once-only steps check their flag first and return the state unchanged
    when the work was already done, so a retried or replayed call never sends
    a second email or opens a second task.
    """

    def __init__(
        self,
        email_service: Optional[EmailService] = None,
        task_service: Optional[FollowUpTaskService] = None,
    ):
        self.email = email_service or EmailService()
        self.tasks = task_service or FollowUpTaskService()

    @activity.defn
    async def send_welcome_email(self, state: OnboardingState) -> OnboardingState:
        if state.welcome_email_sent:
            return state
        employee = state.employee
        activity.logger.info(f"Sending welcome email to {employee.email}")
        await asyncio.to_thread(
            self.email.send_email, [employee.email], WELCOME_SUBJECT, welcome_body(employee.first_name)
        )
        return state.evolve(welcome_email_sent=True)

    @activity.defn
    async def send_thankyou_email(self, state: OnboardingState) -> OnboardingState:
        if state.thankyou_email_sent:
            return state
        if not state.form_filled:
            raise ApplicationError(
                "Refusing to send thank-you email before the form is filled",
                type="FormNotFilled",
                non_retryable=True,
            )
        employee = state.employee
        activity.logger.info(f"Sending thank-you email to {employee.email}")
        await asyncio.to_thread(
            self.email.send_email, [employee.email], THANKYOU_SUBJECT, thankyou_body(employee.first_name)
        )
        return state.evolve(thankyou_email_sent=True)

    @activity.defn
    async def send_reminder_email(self, state: OnboardingState) -> OnboardingState:
        employee = state.employee
        reminder_number = state.reminders_sent + 1
        activity.logger.info(f"Sending reminder #{reminder_number} to {employee.email}")
        await asyncio.to_thread(
            self.email.send_email,
            [employee.email],
            REMINDER_SUBJECT,
            reminder_body(employee.first_name, reminder_number),
        )
        return state.evolve(reminders_sent=reminder_number)

    @activity.defn
    async def create_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        if state.follow_up_task_created:
            return state
        task = self.tasks.create(follow_up_task_name(state), priority_for_reminders(state.reminders_sent))
        activity.logger.info(f"Created follow-up task {task.id} with priority {task.priority.value}")
        return state.evolve(follow_up_task_created=True, follow_up_task=task)

    @activity.defn
    async def update_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        if state.follow_up_task is None:
            return state
        task = self.tasks.update(
            state.follow_up_task,
            priority_for_reminders(state.reminders_sent),
            FollowUpStatus.IN_PROGRESS,
        )
        activity.logger.info(f"Updated follow-up task {task.id} to priority {task.priority.value}")
        return state.evolve(follow_up_task=task)

    @activity.defn
    async def create_or_update_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        if state.follow_up_task_created:
            return await self.update_follow_up_task(state)
        return await self.create_follow_up_task(state)

    @activity.defn
    async def complete_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        if state.follow_up_task is None or state.follow_up_task.status == FollowUpStatus.COMPLETED:
            return state
        task = self.tasks.complete(state.follow_up_task)
        activity.logger.info(f"Completed follow-up task {task.id}")
        return state.evolve(follow_up_task=task)

    def all(self) -> list:
        """Bound activity callables for Worker registration."""
        return [
            self.send_welcome_email,
            self.send_thankyou_email,
            self.send_reminder_email,
            self.create_follow_up_task,
            self.update_follow_up_task,
            self.create_or_update_follow_up_task,
            self.complete_follow_up_task,
        ]
