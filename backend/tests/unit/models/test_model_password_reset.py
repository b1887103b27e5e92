"""Unit tests for PasswordReset usability rules."""

from __future__ import annotations

from freezegun import freeze_time

from excursion_api.models.password_reset import PasswordResetStatus
from tests.factories.password_reset import PasswordResetFactory


class TestPasswordResetModel:
    def test_new_entry_is_requested(self, session):
        entry = PasswordResetFactory()
        assert entry.status is PasswordResetStatus.REQUESTED
        assert entry.is_used is False
        assert entry.is_expired is False

    def test_entry_expires_after_ten_minutes(self, session):
        """
        GIVEN an entry created at noon
        WHEN the clock reaches its ``expires_on``
        THEN it is reported expired, and not a second earlier
        """
        with freeze_time("2026-05-01 12:00:00"):
            entry = PasswordResetFactory()
        with freeze_time("2026-05-01 12:09:59"):
            assert entry.is_expired is False
        with freeze_time("2026-05-01 12:10:00"):
            assert entry.is_expired is True

    def test_changed_entry_is_used(self, session):
        entry = PasswordResetFactory(status=PasswordResetStatus.PWD_CHANGED)
        assert entry.is_used is True
