"""
HR follow-up task tracker.

Keeps open follow-up tasks in process memory. Ids are random so tasks opened
by different worker processes never collide; completed tasks are dropped.
Activities talk to it through create / update / complete only, so a ticketing
backend can replace it without touching the workflow.
"""

import logging
import uuid
from typing import Dict, Optional

from onboardflow.platform.config import settings
from onboardflow.workflows.errors import FollowUpTaskError
from onboardflow.workflows.models import FollowUpPriority, FollowUpStatus, FollowUpTask

logger = logging.getLogger(__name__)


def new_task_id() -> str:
    return f"FUT-{uuid.uuid4().hex[:12]}"


class FollowUpTaskService:
    def __init__(self, assignee: Optional[str] = None):
        self.assignee = assignee or settings.HR_TASK_ASSIGNEE
        self._tasks: Dict[str, FollowUpTask] = {}

    def create(self, name: str, priority: FollowUpPriority) -> FollowUpTask:
        task = FollowUpTask(
            id=new_task_id(),
            name=name,
            priority=priority,
            status=FollowUpStatus.NEW,
        )
        self._tasks[task.id] = task
        logger.info(f"Created follow-up task {task.id} for {self.assignee}: {name} ({priority.value})")
        return task

    def update(self, task: FollowUpTask, priority: FollowUpPriority, status: FollowUpStatus) -> FollowUpTask:
        current = self._resolve(task)
        if current.status == FollowUpStatus.COMPLETED:
            raise FollowUpTaskError(f"Follow-up task {task.id} is already completed")
        updated = current.model_copy(update={"priority": priority, "status": status})
        self._tasks[task.id] = updated
        logger.info(f"Updated follow-up task {task.id}: {priority.value} / {status.value}")
        return updated

    def complete(self, task: FollowUpTask) -> FollowUpTask:
        current = self._resolve(task)
        completed = current.model_copy(update={"status": FollowUpStatus.COMPLETED})
        self._tasks.pop(task.id, None)
        logger.info(f"Completed follow-up task {task.id}")
        return completed

    def get(self, task_id: str) -> Optional[FollowUpTask]:
        """Open task with ``task_id``; completed tasks are no longer tracked."""
        return self._tasks.get(task_id)

    def open_count(self) -> int:
        return len(self._tasks)

    def _resolve(self, task: FollowUpTask) -> FollowUpTask:
        # The workflow's copy is authoritative. A task created by a previous
        # worker process, or a stored entry for a different task under the
        # same id, is replaced by it.
        current = self._tasks.get(task.id)
        if current is None or current.name != task.name:
            if current is not None:
                logger.warning(f"Follow-up task {task.id} belongs to '{current.name}', re-registering '{task.name}'")
            else:
                logger.warning(f"Follow-up task {task.id} unknown to this tracker, re-registering")
            self._tasks[task.id] = task
            current = task
        return current
