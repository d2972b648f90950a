"""Business rules for creating, reading, updating and deleting tasks."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from tasktracker.models import RequestCreateTask, RequestUpdateTask, ResponseCreateTask
from tasktracker.repository import RepositoryError, Task, TaskRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "TO_DO"


class ValidationError(ValueError):
    """Raised when a request cannot be acted on as given."""


def _parse_uuid(text: str) -> uuid.UUID:
    try:
        return uuid.UUID(text)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValidationError(f"invalid UUID: {text!r}") from exc


def _response(task: Task) -> ResponseCreateTask:
    return ResponseCreateTask(
        id=task.id,
        name=task.name,
        description=task.description,
        status=task.status,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


class TaskService:
    """Validates task requests and carries them out through the repositories."""

    def __init__(self, task_repo: TaskRepository, user_repo: UserRepository) -> None:
        self._task_repo = task_repo
        self._user_repo = user_repo

    def create_task(self, request: RequestCreateTask) -> ResponseCreateTask:
        """Create a task; the status defaults to TO_DO when none is given."""
        logger.info("TaskService.create_task - starting task creation for: %s", request.name)
        if not request.name:
            logger.info("TaskService.create_task - no name was provided for the task")
            raise ValidationError("name field for task is required")

        task = Task(
            name=request.name,
            description=request.description,
            status=request.status or DEFAULT_STATUS,
            user_id=request.user_id,
        )
        try:
            created = self._task_repo.create_task(task)
        except RepositoryError as exc:
            logger.error("TaskService.create_task - database error: %s", exc)
            raise RepositoryError(f"failed to create task: {exc}") from exc

        logger.info("TaskService.create_task - task created: %s", created.id)
        return _response(created)

    def get_task_by_id(self, task_id: str) -> Task:
        logger.info("TaskService.get_task_by_id - fetching task: %s", task_id)
        task = self._task_repo.get_task_by_id(_parse_uuid(task_id))
        logger.info("TaskService.get_task_by_id - fetched task: %s", task_id)
        return task

    def get_tasks_by_user_id(self, user_id: str) -> list[Task]:
        logger.info("TaskService.get_tasks_by_user_id - fetching tasks of user: %s", user_id)
        tasks = self._task_repo.get_tasks_by_user_id(_parse_uuid(user_id))
        logger.info("TaskService.get_tasks_by_user_id - fetched tasks of user: %s", user_id)
        return tasks

    def get_tasks(self) -> list[Task]:
        logger.info("TaskService.get_tasks - fetching tasks")
        tasks = self._task_repo.get_tasks()
        logger.info("TaskService.get_tasks - fetched tasks")
        return tasks

    def get_tasks_by_email(self, email: str) -> list[Task]:
        """Tasks of the user with this e-mail; an unknown e-mail is not a valid user id."""
        logger.info("TaskService.get_tasks_by_email - fetching tasks by email: %s", email)
        user_id = self._user_repo.get_user_id_by_email(email)
        tasks = self._task_repo.get_tasks_by_user_id(_parse_uuid(user_id))
        logger.info("TaskService.get_tasks_by_email - fetched tasks by email: %s", email)
        return tasks

    def update_task_details(
        self, task_id: str, request: Optional[RequestUpdateTask]
    ) -> ResponseCreateTask:
        """Apply every field the request sets, in the order name, description, status."""
        if request is None or request.is_empty():
            raise ValidationError("nothing to update")

        logger.info("TaskService.update_task_details - updating task: %s", task_id)
        key = _parse_uuid(task_id)

        updates = (
            (request.name, self._task_repo.update_name),
            (request.description, self._task_repo.update_description),
            (request.status, self._task_repo.update_status),
        )
        task: Optional[Task] = None
        for value, apply in updates:
            if value is not None:
                task = apply(key, value)

        logger.info("TaskService.update_task_details - updated task: %s", task_id)
        return _response(task)

    def delete_task(self, task_id: str) -> None:
        self._task_repo.delete_task(_parse_uuid(task_id))