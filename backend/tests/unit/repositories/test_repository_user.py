"""Unit tests for UserRepository."""

from __future__ import annotations

import pytest

from excursion_api.models.user import UserStatus
from excursion_api.repositories.user import UserRepository, normalize_email
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` hides deleted accounts from generic reads."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository(session=session)

    def test_normalize_email(self):
        assert normalize_email("  Ana@Example.COM ") == "ana@example.com"

    def test_get_by_email_is_case_insensitive(self, repo):
        user = UserFactory(email="alice@example.com", username="alice")

        fetched = repo.get_by_email("ALICE@example.com ")
        assert fetched is not None
        assert fetched.id == user.id

    def test_generic_reads_skip_deleted_users(self, repo):
        user = UserFactory(email="gone@example.com", status=UserStatus.DELETED)

        assert repo.get(user.id) is None
        assert repo.get_by_email("gone@example.com") is None
        assert repo.find_one(id=user.id) is None
        assert not repo.exists(email="gone@example.com")
        assert user.id not in {u.id for u in repo.list()}

    def test_login_lookup_sees_deleted_users(self, repo):
        user = UserFactory(email="gone@example.com", status=UserStatus.DELETED)

        fetched = repo.get_by_email_including_deleted("Gone@example.com")
        assert fetched is not None
        assert fetched.id == user.id
        assert fetched.is_deleted

    def test_taken_checks_include_deleted_users(self, repo):
        UserFactory(email="old@example.com", username="olduser", status=UserStatus.DELETED)

        assert repo.username_taken("olduser")
        assert repo.email_taken("OLD@example.com")
        assert not repo.username_taken("newuser")
        assert not repo.email_taken("new@example.com")

    def test_find_one_ignores_unknown_filters(self, repo):
        user = UserFactory(username="bob")
        assert repo.find_one(username="bob", password_hash="x").id == user.id

    def test_delete_is_soft(self, repo, session):
        user = UserFactory()
        repo.delete(user)
        session.commit()

        assert repo.get(user.id) is None
        assert repo.get_by_email_including_deleted(user.email).status == UserStatus.DELETED

    def test_add_to_role_creates_role_once(self, repo, session):
        first = UserFactory()
        second = UserFactory()

        repo.add_to_role(first, "CandidateUser")
        repo.add_to_role(second, "CandidateUser")
        repo.add_to_role(second, "CandidateUser")
        session.commit()

        role = repo.get_role("CandidateUser")
        assert role is not None
        assert first.role_names == ["CandidateUser"]
        assert [r.id for r in second.roles] == [role.id]
