"""JWT authentication read from the access_token cookie."""

from __future__ import annotations

import functools
import os
from typing import Any, Callable, Optional
from urllib.parse import unquote_plus

import jwt
from flask import Request, g, jsonify
from flask import request as _current_request

COOKIE_NAME = "access_token"
_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class AuthError(Exception):
    """Raised when a request carries no usable token."""


def parse_token(token: str) -> dict[str, Any]:
    """Verify an HMAC-signed token with JWT_SECRET and return its claims."""
    secret = os.environ.get("JWT_SECRET", "")
    if not secret:
        raise AuthError("invalid token")
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=_HMAC_ALGORITHMS,
            options={"verify_iat": False},
        )
    except jwt.InvalidTokenError as exc:
        raise AuthError("invalid token") from exc
    if not isinstance(claims, dict):
        raise AuthError("invalid claims")
    return claims


def parse_jwt_from_cookie(request: Request) -> dict[str, Any]:
    """Return the verified claims of the request's access_token cookie."""
    cookie = request.cookies.get(COOKIE_NAME, "")
    if not cookie:
        raise AuthError("missing auth token")
    return parse_token(unquote_plus(cookie))


def jwt_auth(view: Callable[..., Any]) -> Callable[..., Any]:
    """Reject the request with 401 unless it carries a valid token with an id."""

    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            claims = parse_jwt_from_cookie(_current_request)
        except AuthError as exc:
            return jsonify({"error": str(exc)}), 401
        user_id = claims.get("id")
        if isinstance(user_id, str):
            g.user_id = user_id
            return view(*args, **kwargs)
        return jsonify({"error": "Invalid ID or userID in token"}), 401

    return wrapper


def jwt_auth_optional(view: Callable[..., Any]) -> Callable[..., Any]:
    """Record the user id when a valid token is present, never rejecting."""

    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            claims = parse_jwt_from_cookie(_current_request)
        except AuthError:
            claims = {}
        user_id = claims.get("id")
        if isinstance(user_id, str):
            g.user_id = user_id
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> Optional[str]:
    """The authenticated user's id for the current request, if any."""
    return g.get("user_id")