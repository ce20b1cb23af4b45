"""Argument guards for hash/verify credential inputs."""

from __future__ import annotations

from password_security.domain.errors import InvalidArgumentError


def require_user(*, user: object) -> None:
    """Reject a missing or blank user identifier."""

    if user is None:
        raise InvalidArgumentError("user cannot be None")
    if isinstance(user, str) and not user.strip():
        raise InvalidArgumentError("user cannot be blank")


def require_password(*, password: object, allow_empty: bool = False) -> str:
    """Return the plaintext password, rejecting None and non-string values.

    Passwords are never stripped or normalized; the exact characters are hashed.
    """

    if password is None:
        raise InvalidArgumentError("password cannot be None")
    if not isinstance(password, str):
        raise InvalidArgumentError("password must be a string")
    if not password and not allow_empty:
        raise InvalidArgumentError("password cannot be empty")
    return password


def require_password_hash(*, password_hash: object) -> str:
    """Return the stored encoded hash, rejecting None and blank values."""

    if password_hash is None:
        raise InvalidArgumentError("password_hash cannot be None")
    if not isinstance(password_hash, str):
        raise InvalidArgumentError("password_hash must be a string")
    if not password_hash.strip():
        raise InvalidArgumentError("password_hash cannot be blank")
    return password_hash
