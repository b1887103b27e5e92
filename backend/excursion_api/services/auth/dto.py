from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Generic, TypeVar

from excursion_api.services._shared.errors import AuthErrorKind

T = TypeVar("T")

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login and password re-validation.

    :param email: User email (normalized by the repository).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    Confirmation fields are checked by the API schema; only the final values
    reach the service.
    """

    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    birth_date: date | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param access_token: Last access token, usually expired.
    :type access_token: str
    :param refresh_token: Opaque refresh token from the ledger.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class ConfirmEmailIn:
    user_id: str
    email: str


@dataclass(frozen=True, slots=True)
class PasswordResetIn:
    """
    Input DTO identifying a password reset entry.

    :param user_id: Owner of the entry.
    :type user_id: str
    :param token: Reset token delivered to the user.
    :type token: str
    """

    user_id: str
    token: str


@dataclass(frozen=True, slots=True)
class UpdatePasswordIn:
    user_id: str
    token: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public projection of the authenticated user."""

    id: str
    email: str
    username: str
    first_name: str | None
    last_name: str | None
    roles: tuple[str, ...]
    email_confirmed: bool


@dataclass(frozen=True, slots=True)
class AuthResult(Generic[T]):
    """
    Tagged outcome of an auth operation.

    Exactly one of ``value`` and ``error`` is set. Expected failures never
    escape as exceptions.
    """

    value: T | None = None
    error: AuthErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> AuthResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: AuthErrorKind, message: str | None = None) -> AuthResult[T]:
        return cls(error=kind, message=message or kind.message)


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime (fixed at 7 days).
    :type refresh_expires: timedelta
    :param reset_expires: Password reset entry lifetime (10 minutes).
    :type reset_expires: timedelta
    """

    access_expires: timedelta
    refresh_expires: timedelta = timedelta(days=7)
    reset_expires: timedelta = timedelta(minutes=10)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build the token lifetimes from a Flask config mapping."""
        return cls(access_expires=timedelta(minutes=int(config["JWT_EXPIRY_IN_MINUTES"])))
