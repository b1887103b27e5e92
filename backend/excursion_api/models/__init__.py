from excursion_api.models.password_reset import PasswordReset, PasswordResetStatus
from excursion_api.models.refresh_token import RefreshToken
from excursion_api.models.registration_request import RegistrationRequest, RegistrationStatus
from excursion_api.models.user import Role, RoleName, User, UserStatus, user_roles

__all__ = [
    "PasswordReset",
    "PasswordResetStatus",
    "RefreshToken",
    "RegistrationRequest",
    "RegistrationStatus",
    "Role",
    "RoleName",
    "User",
    "UserStatus",
    "user_roles",
]
