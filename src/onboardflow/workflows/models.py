"""
Onboarding data model.

The models are immutable: activities and the state machine produce updated
copies with ``model_copy(update=...)`` instead of mutating in place. They are
serialized across the Temporal boundary with the pydantic data converter.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from onboardflow.workflows.errors import OnboardingConfigurationError


class FollowUpPriority(str, Enum):
    """Priority of the HR follow-up task."""

    NORMAL = "NORMAL"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class FollowUpStatus(str, Enum):
    """Lifecycle status of the HR follow-up task."""

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class OnboardingPhase(str, Enum):
    """Named states of the onboarding state machine."""

    AWAITING_FORM = "AWAITING_FORM"
    REMINDING = "REMINDING"
    COMPLETED = "COMPLETED"
    ESCALATED_UNRESOLVED = "ESCALATED_UNRESOLVED"

    @property
    def is_terminal(self) -> bool:
        return self in (OnboardingPhase.COMPLETED, OnboardingPhase.ESCALATED_UNRESOLVED)


def priority_for_reminders(reminders_sent: int) -> FollowUpPriority:
    """Map the number of reminders sent so far to a follow-up task priority."""
    if reminders_sent <= 1:
        return FollowUpPriority.NORMAL
    if reminders_sent <= 2:
        return FollowUpPriority.HIGH
    return FollowUpPriority.CRITICAL


class Employee(BaseModel):
    """The person being onboarded."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    email: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class FollowUpTask(BaseModel):
    """HR task tracking an employee who has not filled the onboarding form."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    priority: FollowUpPriority
    status: FollowUpStatus = FollowUpStatus.NEW


class OnboardingState(BaseModel):
    """
    Durable record of one employee's onboarding progress.

    This is both the workflow input and its result; the ``getWorkflowState``
    query returns the latest snapshot of it.
    """

    model_config = ConfigDict(frozen=True)

    employee: Employee
    welcome_email_sent: bool = False
    thankyou_email_sent: bool = False
    form_filled: bool = False
    follow_up_task_created: bool = False
    follow_up_task: Optional[FollowUpTask] = None
    reminders_sent: int = Field(default=0, ge=0)
    form_fill_deadline: timedelta
    reminder_interval: timedelta
    reminder_limit: int
    phase: OnboardingPhase = OnboardingPhase.AWAITING_FORM

    @model_validator(mode="after")
    def _check_consistency(self) -> "OnboardingState":
        if self.follow_up_task_created != (self.follow_up_task is not None):
            raise ValueError("follow_up_task must be present exactly when follow_up_task_created is set")
        if self.thankyou_email_sent and not self.form_filled:
            raise ValueError("thankyou_email_sent requires form_filled")
        return self

    @classmethod
    def initial(
        cls,
        employee: Employee,
        *,
        form_fill_deadline: timedelta,
        reminder_interval: timedelta,
        reminder_limit: int,
    ) -> "OnboardingState":
        """Build the starting state for a new onboarding, rejecting bad schedules."""
        state = cls(
            employee=employee,
            form_fill_deadline=form_fill_deadline,
            reminder_interval=reminder_interval,
            reminder_limit=reminder_limit,
        )
        state.validate_schedule()
        return state

    def validate_schedule(self) -> None:
        """Raise OnboardingConfigurationError if the timers or limit are unusable."""
        if self.form_fill_deadline <= timedelta(0):
            raise OnboardingConfigurationError(
                f"form_fill_deadline must be positive, got {self.form_fill_deadline}"
            )
        if self.reminder_interval <= timedelta(0):
            raise OnboardingConfigurationError(
                f"reminder_interval must be positive, got {self.reminder_interval}"
            )
        if self.reminder_limit <= 0:
            raise OnboardingConfigurationError(
                f"reminder_limit must be positive, got {self.reminder_limit}"
            )

    def evolve(self, **changes) -> "OnboardingState":
        """Return a copy with ``changes`` applied."""
        return self.model_copy(update=changes)
