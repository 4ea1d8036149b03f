"""
Onboarding worker entry point.

Usage:
    python -m onboardflow.workflows.worker
"""

import asyncio

from temporalio.worker import Worker

from onboardflow.platform.config import settings
from onboardflow.platform.logging import configure_logging, get_logger
from onboardflow.workflows.activities.onboarding import OnboardingActivities
from onboardflow.workflows.client import get_temporal_client
from onboardflow.workflows.definitions.onboarding import EmployeeOnboardingWorkflow

logger = get_logger(__name__)


def build_worker(client, activities: OnboardingActivities, task_queue: str | None = None, **options) -> Worker:
    return Worker(
        client,
        task_queue=task_queue or settings.TEMPORAL_TASK_QUEUE,
        workflows=[EmployeeOnboardingWorkflow],
        activities=activities.all(),
        **options,
    )


async def run_worker() -> None:
    configure_logging()
    client = await get_temporal_client()

    # Bound methods of one instance, so every activity shares the same
    # email and task services.
    worker = build_worker(client, OnboardingActivities())

    logger.info(f"Worker started on queue: {settings.TEMPORAL_TASK_QUEUE}")
    await worker.run()


if __name__ == "__main__":
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        pass
