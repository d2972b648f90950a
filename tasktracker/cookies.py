"""Helpers for setting and clearing the session cookie."""

from urllib.parse import quote_plus

from flask import Response


def set_cookie(response: Response, name: str, value: str, max_age: int, secure: bool) -> None:
    """Set an HTTP-only cookie on the root path.

    A positive max_age sets the lifetime, zero makes a session cookie and a
    negative value deletes the cookie.
    """
    if max_age > 0:
        lifetime = max_age
    elif max_age < 0:
        lifetime = 0
    else:
        lifetime = None
    response.set_cookie(
        name,
        quote_plus(value),
        max_age=lifetime,
        path="/",
        domain=None,
        secure=secure,
        httponly=True,
    )


def clear_cookie(response: Response, name: str, secure: bool) -> None:
    """Tell the client to drop the named cookie."""
    set_cookie(response, name, "", -1, secure)