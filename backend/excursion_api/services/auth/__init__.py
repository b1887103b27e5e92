from .dto import (
    AuthResult,
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
from .service import AuthService

__all__ = [
    "AuthResult",
    "AuthService",
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
