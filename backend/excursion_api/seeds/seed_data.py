"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from excursion_api.models.registration_request import RegistrationRequest, RegistrationStatus
from excursion_api.models.user import Role, RoleName, User

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

USER_FIXTURES: list[dict[str, Any]] = [
    {
        "email": "admin@example.com",
        "username": "admin",
        "first_name": "Ada",
        "last_name": "Admin",
        "password": "adminPass123!",
        "email_confirmed": True,
        "roles": [RoleName.ADMINISTRATOR.value],
        "registration": None,
    },
    {
        "email": "jamie.lee@example.com",
        "username": "jamielee",
        "first_name": "Jamie",
        "last_name": "Lee",
        "password": "strongPass123",
        "email_confirmed": True,
        "roles": [RoleName.USER.value],
        "registration": RegistrationStatus.APPROVED,
    },
    {
        "email": "alex.martinez@example.com",
        "username": "alexm",
        "first_name": "Alex",
        "last_name": "Martinez",
        "password": "devPass123!",
        "email_confirmed": False,
        "roles": [RoleName.CANDIDATE_USER.value],
        "registration": RegistrationStatus.REQUESTED,
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_roles(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the well-known roles."""
    if verbose:
        LOGGER.info("Seeding roles...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}
    for name in RoleName:
        _, created = _get_or_create(session, Role, name=name.value)
        _touch(summary, "roles", created)
    session.commit()
    return summary


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create development accounts with their roles and registration requests."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        email = str(fixture["email"]).strip().lower()
        user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
        created = user is None
        if user is None:
            user = User(
                email=email,
                username=fixture["username"],
                first_name=fixture["first_name"],
                last_name=fixture["last_name"],
                email_confirmed=fixture["email_confirmed"],
            )
            user.password = fixture["password"]
            session.add(user)
            session.flush()
        _touch(summary, "users", created)

        for role_name in fixture["roles"]:
            role, _ = _get_or_create(session, Role, name=role_name)
            if role not in user.roles:
                user.roles.append(role)

        status = fixture["registration"]
        if status is not None:
            _, req_created = _get_or_create(
                session, RegistrationRequest, user_id=user.id, defaults={"status": status}
            )
            _touch(summary, "registration_requests", req_created)

    session.commit()
    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in the correct foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_roles, seed_users):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["seed_roles", "seed_users", "run_all"]
