"""User and role models for the excursion booking app."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, String, Table
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from excursion_api.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UUIDPKMixin


class UserStatus(str, Enum):
    """Lifecycle status of an account. Deleted accounts are kept as rows."""

    ACTIVE = "active"
    DELETED = "deleted"


class RoleName(str, Enum):
    """Well-known role names."""

    CANDIDATE_USER = "CandidateUser"
    USER = "User"
    ADMINISTRATOR = "Administrator"


user_roles = Table(
    "user_roles",
    db.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(PKMixin, ReprMixin, db.Model):
    """Named role granted to users (e.g. ``CandidateUser``)."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity of a booking customer or administrator.

    Fields
    ------
    id : str
        Opaque UUID4 string, used as the ``sub`` claim of access tokens.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    username : str
        Public handle. Unique per system.
    first_name, last_name, phone_number : str | None
        Profile data captured at registration.
    birth_date : date | None
        Optional birth date.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    email_confirmed : bool
        ``True`` once the address has been verified.
    status : UserStatus
        ``active`` or ``deleted``. Deleted rows are never hard-deleted.
    roles : list[Role]
        Granted roles, loaded eagerly for claim building.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="enum_user_status", native_enum=True, create_constraint=True),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    roles: Mapped[list[Role]] = relationship(Role, secondary=user_roles, lazy="selectin")

    __table_args__ = (Index("ix_users_status", "status"),)

    @property
    def is_deleted(self) -> bool:
        return self.status == UserStatus.DELETED

    @property
    def role_names(self) -> list[str]:
        """Granted role names in a stable order."""
        return sorted(role.name for role in self.roles)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValueError: If ``raw`` is empty.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()
