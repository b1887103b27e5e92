from excursion_api.repositories.password_reset import PasswordResetRepository
from excursion_api.repositories.refresh_token import RefreshTokenRepository
from excursion_api.repositories.registration_request import RegistrationRequestRepository
from excursion_api.repositories.user import UserRepository

__all__ = [
    "PasswordResetRepository",
    "RefreshTokenRepository",
    "RegistrationRequestRepository",
    "UserRepository",
]
