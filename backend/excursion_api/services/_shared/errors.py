"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. Expected authentication failures are modelled by :class:`AuthErrorKind`
so the delivery layer can map each of them to its wire contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name (``uq_users_email``) while SQLite
    reports the offending column (``users.email``); both forms are accepted.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Constraint name following the metadata naming convention, e.g.
        ``uq_users_email``.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if not name.startswith("uq_"):
        return False
    # uq_<table>_<column> -> <table>.<column>, splitting at every underscore
    table_column = name.removeprefix("uq_")
    candidates = (
        f"{table_column[:i]}.{table_column[i + 1:]}"
        for i, ch in enumerate(table_column)
        if ch == "_"
    )
    return any(candidate in message for candidate in candidates)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    These are *not* HTTP errors; the API layer decides how to render them.
    """

    pass


class InvalidSignatureError(ServiceError):
    """Raised when a JWT is malformed, forged or signed with another algorithm."""


# --------------------------------------------------------------------------- #
# Authentication failures
# --------------------------------------------------------------------------- #


class AuthErrorKind(Enum):
    """Expected authentication failures with their stable client messages."""

    INVALID_CREDENTIALS = "Invalid Authentication"
    ACCOUNT_DELETED = "Deleted User"
    USERNAME_TAKEN = "Username is already taken."
    EMAIL_TAKEN = "Email is already registered."
    USER_NOT_FOUND = "User not found."
    INVALID_REFRESH_TOKEN = "Invalid refresh token"
    INVALID_SIGNATURE = "Invalid token"
    INCORRECT_PASSWORD = "Current password is not correct!"
    EMAIL_ALREADY_CONFIRMED = "Email is already verified."
    RESET_NOT_FOUND = "Can not find password reset entry."
    RESET_ALREADY_USED = "This entry for password reset has already been used."
    RESET_EXPIRED = "Password reset entry expired."

    @property
    def message(self) -> str:
        return self.value


@dataclass(slots=True)
class AuthFailure(ServiceError):
    """
    Raised inside a unit of work to abort it with an expected failure.

    :param kind: Failure category.
    :type kind: AuthErrorKind
    :param message: Client message; defaults to the kind's message.
    :type message: str | None
    """

    kind: AuthErrorKind
    message: str | None = None

    def __post_init__(self) -> None:
        if self.message is None:
            self.message = self.kind.message

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.kind.name}: {self.message}"
