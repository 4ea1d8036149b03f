import uuid
from typing import Optional

from temporalio.client import Client, WorkflowHandle
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.service import RPCError, RPCStatusCode

from onboardflow.platform.config import settings
from onboardflow.platform.logging import get_logger, onboarding_context
from onboardflow.workflows.definitions.onboarding import EmployeeOnboardingWorkflow
from onboardflow.workflows.models import Employee, OnboardingState

logger = get_logger(__name__)

# Statuses the server answers with when the target workflow has already closed.
_CLOSED_WORKFLOW_STATUSES = (RPCStatusCode.NOT_FOUND, RPCStatusCode.FAILED_PRECONDITION)


async def get_temporal_client() -> Client:
    """
    Get a connected Temporal Client based on configuration settings.

    Uses the pydantic data converter so onboarding models round-trip.
    """
    return await Client.connect(
        settings.TEMPORAL_HOST,
        namespace=settings.TEMPORAL_NAMESPACE,
        data_converter=pydantic_data_converter,
    )


def onboarding_workflow_id(employee: Employee) -> str:
    """Derive the workflow id from the employee id so restarts hit the same instance."""
    business_key = employee.id or uuid.uuid4().hex
    return f"{settings.TEMPORAL_TASK_QUEUE}-{business_key}"


async def start_onboarding(
    client: Client,
    state: OnboardingState,
    *,
    workflow_id: Optional[str] = None,
    task_queue: Optional[str] = None,
) -> WorkflowHandle:
    """Validate the schedule and start an onboarding workflow."""
    state.validate_schedule()
    workflow_id = workflow_id or onboarding_workflow_id(state.employee)

    with onboarding_context(workflow_id, state.employee.email):
        handle = await client.start_workflow(
            EmployeeOnboardingWorkflow.run,
            state,
            id=workflow_id,
            task_queue=task_queue or settings.TEMPORAL_TASK_QUEUE,
        )
        logger.info("Started onboarding workflow")
    return handle


async def signal_form_filled(client: Client, workflow_id: str) -> bool:
    """
    Tell a running onboarding that the form was filled.

    Returns False when the workflow has already closed; the signal is then
    dropped rather than reopening the onboarding.
    """
    handle = client.get_workflow_handle(workflow_id)
    with onboarding_context(workflow_id):
        try:
            await handle.signal(EmployeeOnboardingWorkflow.form_filled)
        except RPCError as e:
            if e.status in _CLOSED_WORKFLOW_STATUSES:
                logger.info("Onboarding already closed, form filled signal dropped", reason=e.message)
                return False
            raise
        logger.info("Form filled signal sent")
    return True


async def get_onboarding_state(client: Client, workflow_id: str) -> Optional[OnboardingState]:
    handle = client.get_workflow_handle(workflow_id)
    return await handle.query(EmployeeOnboardingWorkflow.get_workflow_state)
