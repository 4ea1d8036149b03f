"""
Start a sample onboarding and watch it.

Usage:
    python -m onboardflow.workflows.starter --email jane@example.com \
        --first-name Jane --last-name Doe --fill-after 15
"""

import argparse
import asyncio
import sys
from datetime import timedelta

from onboardflow.platform.config import settings
from onboardflow.platform.logging import configure_logging, get_logger, onboarding_context
from onboardflow.workflows.client import (
    get_onboarding_state,
    get_temporal_client,
    signal_form_filled,
    start_onboarding,
)
from onboardflow.workflows.errors import OnboardingConfigurationError
from onboardflow.workflows.models import Employee, OnboardingState

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start an employee onboarding workflow")
    parser.add_argument("--employee-id", default=None)
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--deadline", type=float, default=settings.FORM_FILL_DEADLINE_SECONDS,
                        help="Seconds the employee has to fill the form")
    parser.add_argument("--reminder-interval", type=float, default=settings.REMINDER_INTERVAL_SECONDS)
    parser.add_argument("--reminder-limit", type=int, default=settings.REMINDER_LIMIT)
    parser.add_argument("--fill-after", type=float, default=None,
                        help="Send the form filled signal after this many seconds")
    return parser.parse_args(argv)


def build_state(args: argparse.Namespace) -> OnboardingState:
    employee = Employee(
        id=args.employee_id,
        email=args.email,
        first_name=args.first_name,
        last_name=args.last_name,
    )
    return OnboardingState.initial(
        employee,
        form_fill_deadline=timedelta(seconds=args.deadline),
        reminder_interval=timedelta(seconds=args.reminder_interval),
        reminder_limit=args.reminder_limit,
    )


async def main(argv=None) -> None:
    args = parse_args(argv)
    try:
        state = build_state(args)
    except OnboardingConfigurationError as e:
        logger.error(f"Invalid onboarding schedule: {e}")
        sys.exit(2)

    client = await get_temporal_client()
    handle = await start_onboarding(client, state)
    print(f"Workflow ID for handle: {handle.id}")

    with onboarding_context(handle.id, state.employee.email):
        if args.fill_after is not None:
            await asyncio.sleep(args.fill_after)
            snapshot = await get_onboarding_state(client, handle.id)
            if snapshot is not None:
                print(snapshot.model_dump_json(indent=2))
            print("Sending form filled signal")
            await signal_form_filled(client, handle.id)

        result = await handle.result()
        logger.info("Onboarding finished", phase=result.phase.value, reminders_sent=result.reminders_sent)
    print(result.model_dump_json(indent=2))


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
