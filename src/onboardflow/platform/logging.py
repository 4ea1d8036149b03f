"""
Onboardflow logging.

structlog for the worker and starter processes. Every event carries the
service name and version; client calls made inside ``onboarding_context``
also carry the workflow id and employee email.
"""

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any, Optional

import structlog

from onboardflow.platform.config import settings


def add_service_info(logger: Any, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("version", settings.VERSION)
    return event_dict


def onboarding_context(workflow_id: str, employee: Optional[str] = None) -> AbstractContextManager:
    """Bind ``workflow_id`` (and ``employee`` when known) to log events in this context."""
    bindings = {"workflow_id": workflow_id}
    if employee is not None:
        bindings["employee"] = employee
    return structlog.contextvars.bound_contextvars(**bindings)


def configure_logging() -> None:
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    if settings.APP_ENV == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_info,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Temporal's workflow.logger and activity.logger go through the standard library.
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)
