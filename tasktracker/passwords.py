"""Password hashing with bcrypt."""

import bcrypt

_DEFAULT_COST = 10
_MAX_PASSWORD_BYTES = 72


class InvalidPasswordError(Exception):
    """Raised when a password does not match its hash."""


def hash_password(password: str) -> str:
    """Return a bcrypt hash of the password."""
    raw = password.encode("utf-8")
    if len(raw) > _MAX_PASSWORD_BYTES:
        raise ValueError(
            "failed to hash password: password length exceeds 72 bytes"
        )
    salt = bcrypt.gensalt(rounds=_DEFAULT_COST, prefix=b"2a")
    return bcrypt.hashpw(raw, salt).decode("ascii")


def check_password(password: str, hashed_password: str) -> None:
    """Raise InvalidPasswordError unless the password matches the hash."""
    raw = password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
    try:
        matches = bcrypt.checkpw(raw, hashed_password.encode("utf-8"))
    except ValueError as exc:
        raise InvalidPasswordError(f"malformed password hash: {exc}") from exc
    if not matches:
        raise InvalidPasswordError(
            "hashedPassword is not the hash of the given password"
        )