"""Tests for the ``flask seed`` command group."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from excursion_api.models import RegistrationRequest, Role, User


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestSeedCommands:
    def test_run_creates_roles_idempotently(self, runner, session):
        first = runner.invoke(args=["seed", "run"])
        second = runner.invoke(args=["seed", "run"])

        assert first.exit_code == 0, first.output
        assert "roles  created= 3  existing= 0" in first.output
        assert "roles  created= 0  existing= 3" in second.output
        names = set(session.execute(select(Role.name)).scalars())
        assert names == {"CandidateUser", "User", "Administrator"}
        assert _count(session, User) == 0

    def test_dev_users_seeds_accounts(self, runner, session):
        result = runner.invoke(args=["seed", "--verbose", "dev-users"])

        assert result.exit_code == 0, result.output
        assert _count(session, User) == 3
        assert _count(session, RegistrationRequest) == 2

        admin = session.execute(select(User).filter_by(username="admin")).scalar_one()
        assert admin.role_names == ["Administrator"]
        assert admin.verify_password("adminPass123!")

    def test_dev_users_is_refused_in_production(self, app, runner, monkeypatch):
        monkeypatch.setitem(app.config, "TESTING", False)
        monkeypatch.setitem(app.config, "DEBUG", False)

        result = runner.invoke(args=["seed", "dev-users"])

        assert result.exit_code != 0
        assert "restricted to non-production" in result.output
