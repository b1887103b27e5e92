"""Pending account approvals created at registration."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from excursion_api.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow

if TYPE_CHECKING:
    from .user import User


class RegistrationStatus(str, Enum):
    """Review states of a registration request."""

    REQUESTED = "Requested"
    WAITING_FOR_USER_CHANGES = "WaitingForUserChanges"
    APPROVED = "Approved"
    DENIED = "Denied"


class RegistrationRequest(PKMixin, ReprMixin, db.Model):
    """
    Administrator review of a new account.

    Fields
    ------
    user_id : str
        FK to :class:`~excursion_api.models.user.User`. One request per user.
    status : RegistrationStatus
        ``Requested`` on creation.
    admin_comment : str | None
        Free-text note left by the reviewing administrator.
    created_on, edited_on, approved_or_denied_on : datetime
        Review timeline; only ``created_on`` is set on creation.
    """

    __tablename__ = "registration_requests"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    status: Mapped[RegistrationStatus] = mapped_column(
        SAEnum(
            RegistrationStatus,
            name="enum_registration_status",
            native_enum=True,
            create_constraint=True,
        ),
        nullable=False,
        default=RegistrationStatus.REQUESTED,
    )
    admin_comment: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    edited_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_or_denied_on: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user: Mapped[User] = relationship("User")
