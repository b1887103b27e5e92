"""Service layer public API.

Re-exports
----------
- Base primitives (from ``excursion_api.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth service (from ``excursion_api.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`RegisterIn`, :class:`RefreshIn`,
      :class:`ConfirmEmailIn`, :class:`PasswordResetIn`,
      :class:`UpdatePasswordIn`, :class:`TokenPairOut`, :class:`UserOut`,
      :class:`AuthResult`, :class:`AuthTokenConfig`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth import (
    AuthResult,
    AuthService,
    AuthTokenConfig,
    ConfirmEmailIn,
    LoginIn,
    PasswordResetIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UpdatePasswordIn,
    UserOut,
)

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "AuthResult",
    "AuthTokenConfig",
    "ConfirmEmailIn",
    "LoginIn",
    "PasswordResetIn",
    "RefreshIn",
    "RegisterIn",
    "TokenPairOut",
    "UpdatePasswordIn",
    "UserOut",
]
