"""Single-use password reset entries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from excursion_api.core.extensions import db

from .base import PKMixin, ReprMixin, as_utc, utcnow

if TYPE_CHECKING:
    from .user import User


class PasswordResetStatus(str, Enum):
    """Lifecycle of a reset entry. ``PwdChanged`` is terminal."""

    REQUESTED = "Requested"
    PWD_CHANGED = "PwdChanged"


class PasswordReset(PKMixin, ReprMixin, db.Model):
    """
    Password reset requested for a user.

    Fields
    ------
    token : str
        Opaque random value sent to the user out of band.
    user_id : str
        FK to :class:`~excursion_api.models.user.User`.
    created_on, expires_on : datetime
        Entries are usable while ``now < expires_on`` (10 minutes).
    status : PasswordResetStatus
        ``Requested`` until the password is changed through it.
    """

    __tablename__ = "password_resets"

    token: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[PasswordResetStatus] = mapped_column(
        SAEnum(
            PasswordResetStatus,
            name="enum_password_reset_status",
            native_enum=True,
            create_constraint=True,
        ),
        nullable=False,
        default=PasswordResetStatus.REQUESTED,
    )

    user: Mapped[User] = relationship("User")

    @property
    def is_used(self) -> bool:
        return self.status == PasswordResetStatus.PWD_CHANGED

    @property
    def is_expired(self) -> bool:
        return utcnow() >= as_utc(self.expires_on)
