"""Storage of tasks and users in the relational database."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from tasktracker.db import NOW_SQL
from tasktracker.models import format_timestamp

IdLike = Union[str, uuid.UUID]

_ZERO_TIME = "0001-01-01T00:00:00Z"
_TASK_COLUMNS = "id, name, description, status, created_at, updated_at"
_USER_COLUMNS = "id, username, email, password_hash, created_at, updated_at"
_UPDATABLE_TASK_COLUMNS = frozenset({"name", "description", "status"})


class RepositoryError(Exception):
    """Raised when a database operation fails."""


class NotFoundError(RepositoryError):
    """Raised when the record an operation needs does not exist."""


class ConflictError(RepositoryError):
    """Raised when a write would break a uniqueness constraint."""


def _uuid_text(value: IdLike) -> str:
    """Canonical text of a UUID; raises ValueError when it is not one."""
    return str(uuid.UUID(str(value)))


def _parse_time(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _render_time(moment: Optional[datetime]) -> str:
    return _ZERO_TIME if moment is None else format_timestamp(moment)


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE" in str(exc).upper()


@dataclass
class Task:
    id: str = ""
    name: str = ""
    description: str = ""
    status: str = ""
    user_id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "user_id": self.user_id,
            "created_at": _render_time(self.created_at),
            "updated_at": _render_time(self.updated_at),
        }


@dataclass
class User:
    id: str = ""
    username: str = ""
    email: str = ""
    password_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, str]:
        """Public fields only; the password hash is never exposed."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": _render_time(self.created_at),
            "updated_at": _render_time(self.updated_at),
        }


def _task_from_row(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        status=row["status"],
        created_at=_parse_time(row["created_at"]),
        updated_at=_parse_time(row["updated_at"]),
    )


def _user_from_row(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=_parse_time(row["created_at"]),
        updated_at=_parse_time(row["updated_at"]),
    )


class TaskRepository:
    """Reads and writes rows of the tasks table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db

    def _select(self, context: str, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._db.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError(f"{context}: {exc}") from exc

    def get_task_by_id(self, task_id: IdLike) -> Task:
        rows = self._select(
            "get task by id",
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?",
            (_uuid_text(task_id),),
        )
        if not rows:
            raise NotFoundError("get task by id: sql: no rows in result set")
        return _task_from_row(rows[0])

    def get_tasks(self) -> list[Task]:
        rows = self._select(
            "get tasks", f"SELECT {_TASK_COLUMNS} FROM tasks ORDER BY rowid"
        )
        return [_task_from_row(row) for row in rows]

    def get_tasks_by_user_id(self, user_id: IdLike) -> list[Task]:
        rows = self._select(
            "get tasks by user id",
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE user_id = ? ORDER BY rowid",
            (_uuid_text(user_id),),
        )
        return [_task_from_row(row) for row in rows]

    def create_task(self, task: Task) -> Task:
        """Insert the task and fill in its id and timestamps."""
        try:
            owner = _uuid_text(task.user_id)
        except ValueError as exc:
            raise RepositoryError(
                f"insert task: invalid input syntax for type uuid: {task.user_id!r}"
            ) from exc
        try:
            cursor = self._db.execute(
                "INSERT INTO tasks (name, description, status, user_id) "
                "VALUES (?, ?, ?, ?)",
                (task.name, task.description, task.status, owner),
            )
            row = self._db.execute(
                "SELECT id, created_at, updated_at FROM tasks WHERE rowid = ?",
                (cursor.lastrowid,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"insert task: {exc}") from exc
        task.id = row["id"]
        task.user_id = owner
        task.created_at = _parse_time(row["created_at"])
        task.updated_at = _parse_time(row["updated_at"])
        return task

    def _update_column(self, column: str, task_id: IdLike, value: str) -> Task:
        if column not in _UPDATABLE_TASK_COLUMNS:
            raise ValueError(f"column {column!r} cannot be updated")
        key = _uuid_text(task_id)
        try:
            cursor = self._db.execute(
                f"UPDATE tasks SET {column} = ?, updated_at = {NOW_SQL} WHERE id = ?",
                (value, key),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("no task found")
            row = self._db.execute(
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc
        if row is None:
            raise NotFoundError("no task found")
        return _task_from_row(row)

    def update_name(self, task_id: IdLike, name: str) -> Task:
        return self._update_column("name", task_id, name)

    def update_description(self, task_id: IdLike, description: str) -> Task:
        return self._update_column("description", task_id, description)

    def update_status(self, task_id: IdLike, status: str) -> Task:
        return self._update_column("status", task_id, status)

    def delete_task(self, task_id: IdLike) -> None:
        try:
            cursor = self._db.execute(
                "DELETE FROM tasks WHERE id = ?", (_uuid_text(task_id),)
            )
        except sqlite3.Error as exc:
            raise RepositoryError(f"delete task: {exc}") from exc
        if cursor.rowcount == 0:
            raise NotFoundError("task not found")


class UserRepository:
    """Reads and writes rows of the users table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db

    def _select_one(self, context: str, sql: str, params: tuple) -> Optional[sqlite3.Row]:
        try:
            return self._db.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"{context}: {exc}") from exc

    def get_user_by_id(self, user_id: IdLike) -> Optional[User]:
        row = self._select_one(
            "query user by id",
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?",
            (_uuid_text(user_id),),
        )
        return None if row is None else _user_from_row(row)

    def get_user_id_by_email(self, email: str) -> str:
        """The id of the user with this e-mail, or an empty string."""
        row = self._select_one(
            "query by email", "SELECT id FROM users WHERE email = ?", (email,)
        )
        return "" if row is None else row["id"]

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._select_one(
            "query by email",
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",
            (email,),
        )
        return None if row is None else _user_from_row(row)

    def create_user(self, user: User) -> User:
        """Insert the user and fill in its id and timestamps."""
        try:
            cursor = self._db.execute(
                "INSERT INTO users (username, email, password_hash) VALUES (?, ?, ?)",
                (user.username, user.email, user.password_hash),
            )
            row = self._db.execute(
                "SELECT id, created_at, updated_at FROM users WHERE rowid = ?",
                (cursor.lastrowid,),
            ).fetchone()
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError("email already exists") from exc
            raise RepositoryError(f"insert user: {exc}") from exc
        except sqlite3.Error as exc:
            raise RepositoryError(f"insert user: {exc}") from exc
        user.id = row["id"]
        user.created_at = _parse_time(row["created_at"])
        user.updated_at = _parse_time(row["updated_at"])
        return user

    def count_users(self) -> int:
        row = self._select_one("count users", "SELECT COUNT(*) AS n FROM users", ())
        return int(row["n"])

    def delete_user(self, user_id: IdLike) -> None:
        try:
            cursor = self._db.execute(
                "DELETE FROM users WHERE id = ?", (_uuid_text(user_id),)
            )
        except sqlite3.Error as exc:
            raise RepositoryError(f"delete user: {exc}") from exc
        if cursor.rowcount == 0:
            raise NotFoundError("user not found")

    def update_username(self, user_id: IdLike, username: str) -> User:
        key = _uuid_text(user_id)
        try:
            cursor = self._db.execute(
                f"UPDATE users SET username = ?, updated_at = {NOW_SQL} WHERE id = ?",
                (username, key),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("user not found")
            row = self._db.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (key,)
            ).fetchone()
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError("username already exists") from exc
            raise RepositoryError(f"update username: {exc}") from exc
        except sqlite3.Error as exc:
            raise RepositoryError(f"update username: {exc}") from exc
        if row is None:
            raise NotFoundError("user not found")
        return _user_from_row(row)