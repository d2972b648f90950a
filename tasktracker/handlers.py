"""HTTP handlers for the task endpoints."""

from __future__ import annotations

import json
from typing import Any

from flask import Response, jsonify, request

from tasktracker.models import RequestCreateTask, RequestUpdateTask
from tasktracker.repository import RepositoryError
from tasktracker.service import TaskService

# Failures the service reports; every one of them is answered with a 500.
_SERVICE_ERRORS = (ValueError, RepositoryError)


def _json(payload: Any, status: int) -> Response:
    response = jsonify(payload)
    response.status_code = status
    return response


def _error(status: int, message: Any) -> Response:
    return _json({"error": str(message)}, status)


def _read_json() -> Any:
    """Decode the request body as JSON; raises ValueError when it is not."""
    return json.loads(request.get_data(as_text=True))


class TaskHandler:
    """Turns HTTP requests into calls on the task service."""

    def __init__(self, task_service: TaskService) -> None:
        self._service = task_service

    def create_task(self) -> Response:
        try:
            body = RequestCreateTask.from_dict(_read_json())
        except ValueError as exc:
            return _error(400, exc)
        try:
            created = self._service.create_task(body)
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return _json(created.to_dict(), 201)

    def get_all_tasks(self) -> Response:
        try:
            tasks = self._service.get_tasks()
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return _json([task.to_dict() for task in tasks] or None, 200)

    def get_task_by_id(self, task_id: str) -> Response:
        try:
            task = self._service.get_task_by_id(task_id)
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return _json(task.to_dict(), 200)

    def get_tasks(self) -> Response:
        """Tasks of one user, chosen by the uid or, failing that, the email query."""
        uid = request.args.get("uid", "")
        email = request.args.get("email", "")
        if not uid and not email:
            return _error(400, "Please pass a valid task id or an email.")
        try:
            if uid:
                tasks = self._service.get_tasks_by_user_id(uid)
            else:
                tasks = self._service.get_tasks_by_email(email)
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return _json([task.to_dict() for task in tasks] or None, 200)

    def update_task_details(self, task_id: str) -> Response:
        try:
            body = RequestUpdateTask.from_dict(_read_json())
        except ValueError as exc:
            return _error(400, exc)
        try:
            updated = self._service.update_task_details(task_id, body)
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return _json(updated.to_dict(), 200)

    def delete_task(self, task_id: str) -> Response:
        if not task_id:
            return _error(400, "Please pass a valid task id as param.")
        try:
            self._service.delete_task(task_id)
        except _SERVICE_ERRORS as exc:
            return _error(500, exc)
        return Response(status=204)