"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    ConfirmEmailSchema,
    LoginSchema,
    PasswordResetRequestSchema,
    PasswordResetSchema,
    RefreshSchema,
    RegistrationSchema,
    UpdatePasswordSchema,
    WhoAmISchema,
)

__all__ = [
    "AuthResponseSchema",
    "ConfirmEmailSchema",
    "LoginSchema",
    "PasswordResetRequestSchema",
    "PasswordResetSchema",
    "RefreshSchema",
    "RegistrationSchema",
    "UpdatePasswordSchema",
    "WhoAmISchema",
]
