from datetime import timedelta

import pytest
from pydantic import ValidationError

from onboardflow.workflows.errors import OnboardingConfigurationError
from onboardflow.workflows.models import (
    FollowUpPriority,
    FollowUpStatus,
    FollowUpTask,
    OnboardingPhase,
    OnboardingState,
    priority_for_reminders,
)


@pytest.mark.parametrize(
    "reminders_sent, expected",
    [
        (0, FollowUpPriority.NORMAL),
        (1, FollowUpPriority.NORMAL),
        (2, FollowUpPriority.HIGH),
        (3, FollowUpPriority.CRITICAL),
        (10, FollowUpPriority.CRITICAL),
    ],
)
def test_priority_for_reminders(reminders_sent, expected):
    assert priority_for_reminders(reminders_sent) == expected


def test_priority_never_decreases():
    order = [FollowUpPriority.NORMAL, FollowUpPriority.HIGH, FollowUpPriority.CRITICAL]
    ranks = [order.index(priority_for_reminders(n)) for n in range(8)]
    assert ranks == sorted(ranks)


def test_initial_state_has_all_flags_cleared(make_state):
    state = make_state()

    assert not state.welcome_email_sent
    assert not state.thankyou_email_sent
    assert not state.form_filled
    assert not state.follow_up_task_created
    assert state.follow_up_task is None
    assert state.reminders_sent == 0
    assert state.phase == OnboardingPhase.AWAITING_FORM


@pytest.mark.parametrize(
    "deadline, interval, limit",
    [
        (0, 10, 3),
        (-5, 10, 3),
        (50, 0, 3),
        (50, 10, 0),
        (50, 10, -1),
    ],
)
def test_initial_rejects_unusable_schedule(employee, deadline, interval, limit):
    with pytest.raises(OnboardingConfigurationError):
        OnboardingState.initial(
            employee,
            form_fill_deadline=timedelta(seconds=deadline),
            reminder_interval=timedelta(seconds=interval),
            reminder_limit=limit,
        )


def test_configuration_error_is_a_value_error(employee):
    state = OnboardingState(
        employee=employee,
        form_fill_deadline=timedelta(seconds=10),
        reminder_interval=timedelta(seconds=10),
        reminder_limit=0,
    )
    with pytest.raises(ValueError):
        state.validate_schedule()


def test_task_must_match_created_flag(employee):
    with pytest.raises(ValidationError):
        OnboardingState(
            employee=employee,
            form_fill_deadline=timedelta(seconds=10),
            reminder_interval=timedelta(seconds=10),
            reminder_limit=3,
            follow_up_task_created=True,
        )

    with pytest.raises(ValidationError):
        OnboardingState(
            employee=employee,
            form_fill_deadline=timedelta(seconds=10),
            reminder_interval=timedelta(seconds=10),
            reminder_limit=3,
            follow_up_task=FollowUpTask(id="001", name="x", priority=FollowUpPriority.NORMAL),
        )


def test_thankyou_requires_form_filled(employee):
    with pytest.raises(ValidationError):
        OnboardingState(
            employee=employee,
            form_fill_deadline=timedelta(seconds=10),
            reminder_interval=timedelta(seconds=10),
            reminder_limit=3,
            thankyou_email_sent=True,
        )


def test_state_is_immutable(make_state):
    state = make_state()
    with pytest.raises(ValidationError):
        state.form_filled = True


def test_evolve_returns_updated_copy(make_state):
    state = make_state()
    updated = state.evolve(welcome_email_sent=True)

    assert updated.welcome_email_sent
    assert not state.welcome_email_sent
    assert updated.employee == state.employee


def test_state_round_trips_through_json(make_state):
    task = FollowUpTask(id="001", name="Remind", priority=FollowUpPriority.HIGH, status=FollowUpStatus.IN_PROGRESS)
    state = make_state(reminders_sent=2, follow_up_task_created=True, follow_up_task=task)

    restored = OnboardingState.model_validate_json(state.model_dump_json())

    assert restored == state
    assert restored.form_fill_deadline == timedelta(seconds=50)
    assert restored.follow_up_task.status == FollowUpStatus.IN_PROGRESS


def test_employee_full_name(employee):
    assert employee.full_name == "Jane Doe"


def test_terminal_phases():
    assert OnboardingPhase.COMPLETED.is_terminal
    assert OnboardingPhase.ESCALATED_UNRESOLVED.is_terminal
    assert not OnboardingPhase.AWAITING_FORM.is_terminal
    assert not OnboardingPhase.REMINDING.is_terminal
