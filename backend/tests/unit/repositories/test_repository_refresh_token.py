"""Unit tests for the refresh-token ledger repository."""

from __future__ import annotations

import base64
from datetime import timedelta

import pytest
from freezegun import freeze_time

from excursion_api.models.base import utcnow
from excursion_api.repositories.refresh_token import RefreshTokenRepository
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self, session):
        return RefreshTokenRepository(session=session)

    def test_generate_returns_32_random_bytes(self):
        first = RefreshTokenRepository.generate()
        second = RefreshTokenRepository.generate()

        assert len(base64.b64decode(first)) == 32
        assert first != second

    def test_store_then_is_valid(self, repo, session):
        user = UserFactory()
        token = repo.generate()
        now = utcnow()

        row = repo.store(user.id, token, now, now + timedelta(days=7))
        session.commit()

        assert row.id is not None
        assert row.revoked_at is None
        assert repo.is_valid(user.id, token)

    def test_is_valid_rejects_unknown_and_foreign_tokens(self, repo):
        row = RefreshTokenFactory()
        other = UserFactory()

        assert not repo.is_valid(row.user_id, "unknown")
        assert not repo.is_valid(other.id, row.token)

    def test_is_valid_rejects_expired_tokens(self, repo):
        with freeze_time("2026-03-01 08:00:00"):
            row = RefreshTokenFactory()
            user_id, token = row.user_id, row.token
        with freeze_time("2026-03-07 08:00:00"):
            assert repo.is_valid(user_id, token)
        with freeze_time("2026-03-08 08:00:01"):
            assert not repo.is_valid(user_id, token)

    def test_revoke_succeeds_only_once(self, repo, session):
        row = RefreshTokenFactory()
        user_id, token = row.user_id, row.token

        assert repo.revoke(user_id, token, "successor") is True
        assert repo.revoke(user_id, token, "another") is False
        session.commit()

        stored = repo.get_by_token(token)
        assert stored.revoked_at is not None
        assert stored.replaced_by_token == "successor"
        assert not repo.is_valid(user_id, token)

    def test_revoke_requires_owner(self, repo):
        row = RefreshTokenFactory()
        other = UserFactory()

        assert repo.revoke(other.id, row.token, "successor") is False
        assert repo.is_valid(row.user_id, row.token)

    def test_revoke_ignores_expired_tokens(self, repo):
        row = RefreshTokenFactory(expires_at=utcnow() - timedelta(seconds=1))
        assert repo.revoke(row.user_id, row.token, "successor") is False

    def test_list_for_user_keeps_the_rotation_chain(self, repo, session):
        user = UserFactory()
        first = RefreshTokenFactory(user=user)
        second = RefreshTokenFactory(user=user)
        RefreshTokenFactory()
        repo.revoke(user.id, first.token, second.token)
        session.commit()

        rows = repo.list_for_user(user.id)
        assert [r.token for r in rows] == [first.token, second.token]
        assert rows[0].replaced_by_token == second.token
        assert rows[1].is_active
