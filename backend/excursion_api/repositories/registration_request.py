"""Registration request persistence."""

from __future__ import annotations

from excursion_api.models.registration_request import RegistrationRequest, RegistrationStatus
from excursion_api.repositories.base import BaseRepository


class RegistrationRequestRepository(BaseRepository[RegistrationRequest]):
    """Persistence-only repository for :class:`RegistrationRequest`."""

    model = RegistrationRequest

    def add_for_user(self, user_id: str) -> RegistrationRequest:
        """Open a ``Requested`` review for a freshly registered user."""
        return self.add(RegistrationRequest(user_id=user_id, status=RegistrationStatus.REQUESTED))

    def get_by_user_id(self, user_id: str) -> RegistrationRequest | None:
        return self.find_one(user_id=user_id)
