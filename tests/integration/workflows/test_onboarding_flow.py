import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from onboardflow.workflows.client import (
    get_onboarding_state,
    get_temporal_client,
    signal_form_filled,
    start_onboarding,
)
from onboardflow.workflows.models import Employee, OnboardingPhase, OnboardingState


@pytest.mark.integration
@pytest.mark.asyncio
async def test_onboarding_flow_e2e():
    """
    Submits an onboarding to the real Temporal server and fills the form.
    Requires:
    - Temporal server running (temporal server start-dev)
    - Worker running (python -m onboardflow.workflows.worker)
    """
    client = await get_temporal_client()

    unique_id = str(uuid4())[:8]
    state = OnboardingState.initial(
        Employee(
            id=f"emp-{unique_id}",
            email=f"test.{unique_id}@example.com",
            first_name="Test",
            last_name=f"User {unique_id}",
        ),
        form_fill_deadline=timedelta(seconds=3),
        reminder_interval=timedelta(seconds=3),
        reminder_limit=3,
    )

    handle = await start_onboarding(client, state)

    # Let the deadline pass so at least one reminder goes out
    await asyncio.sleep(5)
    snapshot = await get_onboarding_state(client, handle.id)
    assert snapshot is not None
    assert snapshot.welcome_email_sent

    assert await signal_form_filled(client, handle.id)
    result = await asyncio.wait_for(handle.result(), timeout=30)

    assert result.phase == OnboardingPhase.COMPLETED
    assert result.thankyou_email_sent
    assert result.reminders_sent >= 1

    # A late signal to the closed workflow is dropped, not an error
    assert await signal_form_filled(client, handle.id) is False
