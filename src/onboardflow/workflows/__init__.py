"""Onboarding workflow: state machine, Temporal binding, activities and client helpers."""

from .errors import (
    EmailDeliveryError,
    FollowUpTaskError,
    InvalidTransitionError,
    OnboardingCancelledError,
    OnboardingConfigurationError,
    OnboardingError,
)
from .models import (
    Employee,
    FollowUpPriority,
    FollowUpStatus,
    FollowUpTask,
    OnboardingPhase,
    OnboardingState,
    priority_for_reminders,
)
from .race import Race, RaceWinner
from .state_machine import TRANSITIONS, ActivityPort, OnboardingStateMachine, TransitionEvent

__all__ = [
    # Errors
    "OnboardingError",
    "OnboardingConfigurationError",
    "InvalidTransitionError",
    "OnboardingCancelledError",
    "EmailDeliveryError",
    "FollowUpTaskError",
    # Data model
    "Employee",
    "FollowUpPriority",
    "FollowUpStatus",
    "FollowUpTask",
    "OnboardingPhase",
    "OnboardingState",
    "priority_for_reminders",
    # State machine
    "ActivityPort",
    "OnboardingStateMachine",
    "Race",
    "RaceWinner",
    "TRANSITIONS",
    "TransitionEvent",
]
