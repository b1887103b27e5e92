"""Append-only refresh-token ledger backed by SQL.

Rotation never deletes rows: a used token is marked revoked and points to
its successor through ``replaced_by_token``, which keeps the rotation chain
auditable. Revocation is a single conditional ``UPDATE`` so two concurrent
refreshes presenting the same token cannot both succeed.
"""

from __future__ import annotations

import base64
import secrets
from datetime import datetime

from sqlalchemy import select, update

from excursion_api.models.base import utcnow
from excursion_api.models.refresh_token import RefreshToken
from excursion_api.repositories.base import BaseRepository

TOKEN_BYTES = 32


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only ledger of issued refresh tokens."""

    model = RefreshToken

    @staticmethod
    def generate() -> str:
        """Return a new opaque token: 32 random bytes, standard base64."""
        return base64.b64encode(secrets.token_bytes(TOKEN_BYTES)).decode("ascii")

    def store(
        self,
        user_id: str,
        token: str,
        issued_at: datetime,
        expires_at: datetime,
    ) -> RefreshToken:
        """Append an active ledger row for ``user_id``.

        :param user_id: Owner of the token.
        :param token: Opaque value from :meth:`generate`.
        :param issued_at: Creation time (UTC).
        :param expires_at: Expiry time (UTC).
        :returns: The flushed row.
        :rtype: RefreshToken
        """
        row = RefreshToken(
            user_id=user_id,
            token=token,
            created_at=issued_at,
            expires_at=expires_at,
        )
        return self.add(row)

    def is_valid(self, user_id: str, token: str) -> bool:
        """Return ``True`` when ``token`` is an active token of ``user_id``."""
        stmt = (
            select(RefreshToken.id)
            .where(
                RefreshToken.token == token,
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),
                RefreshToken.expires_at > utcnow(),
            )
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def revoke(self, user_id: str, old_token: str, new_token: str) -> bool:
        """Revoke ``old_token`` in favour of ``new_token`` if it is still active.

        :param user_id: Owner of both tokens.
        :param old_token: Token presented by the client.
        :param new_token: Successor recorded in ``replaced_by_token``.
        :returns: ``True`` iff exactly one active row was revoked. ``False``
            means the token was unknown, expired or already rotated.
        :rtype: bool
        """
        now = utcnow()
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.token == old_token,
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),
                RefreshToken.expires_at > now,
            )
            .values(revoked_at=now, replaced_by_token=new_token)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def get_by_token(self, token: str) -> RefreshToken | None:
        """Return the ledger row for ``token`` reloaded from the database."""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token == token)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def list_for_user(self, user_id: str) -> list[RefreshToken]:
        """Return every ledger row of ``user_id`` in issue order."""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())
