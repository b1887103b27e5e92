"""Password reset persistence."""

from __future__ import annotations

import secrets
from datetime import datetime

from sqlalchemy import select, update

from excursion_api.models.base import utcnow
from excursion_api.models.password_reset import PasswordReset, PasswordResetStatus
from excursion_api.repositories.base import BaseRepository


class PasswordResetRepository(BaseRepository[PasswordReset]):
    """Persistence-only repository for :class:`PasswordReset` entries."""

    model = PasswordReset

    @staticmethod
    def generate() -> str:
        """Return a new URL-safe reset token (32 random bytes)."""
        return secrets.token_urlsafe(32)

    def add_for_user(
        self,
        user_id: str,
        token: str,
        created_on: datetime,
        expires_on: datetime,
    ) -> PasswordReset:
        """Append a ``Requested`` entry for ``user_id`` and flush."""
        entry = PasswordReset(
            user_id=user_id,
            token=token,
            created_on=created_on,
            expires_on=expires_on,
            status=PasswordResetStatus.REQUESTED,
        )
        return self.add(entry)

    def find_by_user_and_token(self, user_id: str, token: str) -> PasswordReset | None:
        """Return the entry matching ``(user_id, token)`` reloaded from the database."""
        stmt = (
            select(PasswordReset)
            .where(PasswordReset.user_id == user_id, PasswordReset.token == token)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def mark_used(self, entry_id: int) -> bool:
        """Move a still usable entry to ``PwdChanged``.

        :param entry_id: Primary key of the entry.
        :returns: ``True`` iff exactly one ``Requested``, unexpired row changed.
        :rtype: bool
        """
        stmt = (
            update(PasswordReset)
            .where(
                PasswordReset.id == entry_id,
                PasswordReset.status == PasswordResetStatus.REQUESTED,
                PasswordReset.expires_on > utcnow(),
            )
            .values(status=PasswordResetStatus.PWD_CHANGED)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
