"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import timedelta

import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

from onboardflow.workflows.errors import EmailDeliveryError
from onboardflow.workflows.models import Employee, OnboardingState


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("SMTP_ENABLED", "false")


class FakeEmailService:
    """Records emails instead of sending them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_email(self, to_emails, subject, body) -> None:
        if self.fail:
            raise EmailDeliveryError("SMTP server unavailable")
        self.sent.append((tuple(to_emails), subject, body))

    def subjects(self):
        return [subject for _, subject, _ in self.sent]


@pytest.fixture
def employee() -> Employee:
    return Employee(id="emp0000057", email="jane.doe@example.com", first_name="Jane", last_name="Doe")


@pytest.fixture
def make_state(employee):
    def _make(deadline=50, interval=10, limit=3, **changes) -> OnboardingState:
        state = OnboardingState.initial(
            employee,
            form_fill_deadline=timedelta(seconds=deadline),
            reminder_interval=timedelta(seconds=interval),
            reminder_limit=limit,
        )
        return state.evolve(**changes) if changes else state

    return _make


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def failing_email_service() -> FakeEmailService:
    return FakeEmailService(fail=True)
