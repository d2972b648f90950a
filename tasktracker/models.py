"""Request and response bodies exchanged by the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("request body must be a JSON object")
    return data


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _optional_string_field(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as RFC 3339 with trailing zeros of the fraction removed."""
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = moment.utcoffset()
    if offset is None:
        return text
    if not offset:
        return text + "Z"
    zone = moment.strftime("%z")
    return f"{text}{zone[:3]}:{zone[3:5]}"


@dataclass
class RequestCreateTask:
    name: str = ""
    description: str = ""
    status: str = ""
    user_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "RequestCreateTask":
        body = _require_mapping(data)
        return cls(
            name=_string_field(body, "name"),
            description=_string_field(body, "description"),
            status=_string_field(body, "status"),
            user_id=_string_field(body, "user_id"),
        )


@dataclass
class ResponseCreateTask:
    id: str
    name: str
    description: str
    status: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }


@dataclass
class RequestUpdateTask:
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RequestUpdateTask":
        body = _require_mapping(data)
        return cls(
            name=_optional_string_field(body, "name"),
            description=_optional_string_field(body, "description"),
            status=_optional_string_field(body, "status"),
        )

    def is_empty(self) -> bool:
        """True when the request changes no field at all."""
        return self.name is None and self.description is None and self.status is None


@dataclass
class RequestCreateUser:
    username: str = ""
    email: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "RequestCreateUser":
        body = _require_mapping(data)
        return cls(
            username=_string_field(body, "username"),
            email=_string_field(body, "email"),
            password=_string_field(body, "password"),
        )


@dataclass
class RequestLoginUser:
    email: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "RequestLoginUser":
        body = _require_mapping(data)
        return cls(
            email=_string_field(body, "email"),
            password=_string_field(body, "password"),
        )


@dataclass
class ResponseLoginUser:
    access_token: str
    id: str
    username: str

    def to_dict(self) -> dict[str, str]:
        return {
            "access_token": self.access_token,
            "id": self.id,
            "username": self.username,
        }