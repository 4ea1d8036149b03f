"""Exception hierarchy for the onboarding workflow."""


class OnboardingError(Exception):
    """Base class for onboarding errors."""


class OnboardingConfigurationError(OnboardingError, ValueError):
    """Raised when an onboarding is started with an unusable schedule."""


class InvalidTransitionError(OnboardingError):
    """Raised when the state machine is asked for a transition it does not define."""

    def __init__(self, phase, event):
        super().__init__(f"No transition from {phase.value} on {event.value}")
        self.phase = phase
        self.event = event


class OnboardingCancelledError(OnboardingError):
    """Raised when a wait is resolved by cancellation rather than signal or timer."""


class EmailDeliveryError(OnboardingError):
    """Raised when an email could not be handed to the mail server."""


class FollowUpTaskError(OnboardingError):
    """Raised when the follow-up task tracker rejects an operation."""
