"""User and role persistence."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, select

from excursion_api.models.user import Role, User, UserStatus
from excursion_api.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Every generic read path only sees ``active`` users. Login is the single
    caller that must also see deleted accounts and goes through
    :meth:`get_by_email_including_deleted`.
    """

    model = User

    def _default_scope(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.where(User.status == UserStatus.ACTIVE)

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {
            "id": User.id,
            "email": User.email,
            "username": User.username,
        }

    def _soft_delete(self, instance: User) -> bool:
        instance.status = UserStatus.DELETED
        return True

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch an active user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found or deleted.
        :rtype: User | None
        """
        return self.find_one(email=normalize_email(email))

    def get_by_email_including_deleted(self, email: str) -> User | None:
        """Fetch a user by email regardless of status.

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance (possibly deleted) or ``None``.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def username_taken(self, username: str) -> bool:
        """Return ``True`` when any account, deleted ones included, holds ``username``."""
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def email_taken(self, email: str) -> bool:
        """Return ``True`` when any account, deleted ones included, holds ``email``."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Roles ----------------------------

    def get_role(self, name: str) -> Role | None:
        stmt = select(Role).where(Role.name == name)
        return cast(Role | None, self.session.execute(stmt).scalars().first())

    def ensure_role(self, name: str) -> Role:
        """Return the role called ``name``, creating it when missing.

        :param name: Role name (see :class:`~excursion_api.models.user.RoleName`).
        :type name: str
        :returns: Persistent role.
        :rtype: Role
        """
        role = self.get_role(name)
        if role is None:
            role = Role(name=name)
            self.session.add(role)
            self.flush()
        return role

    def add_to_role(self, user: User, name: str) -> None:
        """Grant ``name`` to ``user`` (idempotent) and flush."""
        role = self.ensure_role(name)
        if role not in user.roles:
            user.roles.append(role)
        self.flush()
