from datetime import timedelta
from typing import Optional

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ApplicationError

# Activities and models are plain, deterministic imports; pass them through
# the sandbox instead of re-importing them for every workflow run.
with workflow.unsafe.imports_passed_through():
    from onboardflow.platform.config import settings
    from onboardflow.workflows.activities.onboarding import OnboardingActivities
    from onboardflow.workflows.errors import OnboardingConfigurationError
    from onboardflow.workflows.models import OnboardingState
    from onboardflow.workflows.race import Race
    from onboardflow.workflows.state_machine import OnboardingStateMachine

FORM_FILLED_SIGNAL = "formFilledSignal"
GET_WORKFLOW_STATE_QUERY = "getWorkflowState"


class TemporalActivityPort:
    """Runs each state machine operation as a Temporal activity."""

    def __init__(self, start_to_close_timeout: timedelta, retry_policy: RetryPolicy) -> None:
        self.start_to_close_timeout = start_to_close_timeout
        self.retry_policy = retry_policy

    async def _execute(self, activity_method, state: OnboardingState) -> OnboardingState:
        return await workflow.execute_activity_method(
            activity_method,
            state,
            start_to_close_timeout=self.start_to_close_timeout,
            retry_policy=self.retry_policy,
        )

    async def send_welcome_email(self, state: OnboardingState) -> OnboardingState:
        return await self._execute(OnboardingActivities.send_welcome_email, state)

    async def send_thankyou_email(self, state: OnboardingState) -> OnboardingState:
        return await self._execute(OnboardingActivities.send_thankyou_email, state)

    async def send_reminder_email(self, state: OnboardingState) -> OnboardingState:
        return await self._execute(OnboardingActivities.send_reminder_email, state)

    async def create_or_update_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        return await self._execute(OnboardingActivities.create_or_update_follow_up_task, state)

    async def complete_follow_up_task(self, state: OnboardingState) -> OnboardingState:
        return await self._execute(OnboardingActivities.complete_follow_up_task, state)


@workflow.defn(name="EmployeeOnboardingWorkflow")
class EmployeeOnboardingWorkflow:
    """
    Welcome a new employee, wait for the onboarding form and escalate with
    reminders and an HR follow-up task when it is late.

    The result is the final OnboardingState, either COMPLETED or
    ESCALATED_UNRESOLVED.
    """

    def __init__(self) -> None:
        activities = TemporalActivityPort(
            start_to_close_timeout=timedelta(seconds=settings.ACTIVITY_START_TO_CLOSE_SECONDS),
            retry_policy=RetryPolicy(
                initial_interval=timedelta(seconds=settings.ACTIVITY_INITIAL_RETRY_SECONDS),
                maximum_attempts=settings.ACTIVITY_MAX_ATTEMPTS,
            ),
        )
        self._machine = OnboardingStateMachine(activities, Race(), logger=workflow.logger)

    @workflow.run
    async def run(self, initial: OnboardingState) -> OnboardingState:
        try:
            initial.validate_schedule()
        except OnboardingConfigurationError as e:
            raise ApplicationError(str(e), type="OnboardingConfigurationError", non_retryable=True) from e

        workflow.logger.info(f"Starting onboarding for {initial.employee.email}")
        return await self._machine.run(initial)

    @workflow.signal(name=FORM_FILLED_SIGNAL)
    def form_filled(self) -> None:
        self._machine.notify_form_filled()

    @workflow.query(name=GET_WORKFLOW_STATE_QUERY)
    def get_workflow_state(self) -> Optional[OnboardingState]:
        return self._machine.state
