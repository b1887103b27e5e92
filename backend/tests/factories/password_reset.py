"""Factory Boy definition for password reset entries."""

from __future__ import annotations

from datetime import timedelta

import factory

from excursion_api.models.base import utcnow
from excursion_api.models.password_reset import PasswordReset, PasswordResetStatus
from excursion_api.repositories.password_reset import PasswordResetRepository
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class PasswordResetFactory(BaseFactory):
    class Meta:
        model = PasswordReset

    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    token = factory.LazyFunction(PasswordResetRepository.generate)
    created_on = factory.LazyFunction(utcnow)
    expires_on = factory.LazyAttribute(lambda o: o.created_on + timedelta(minutes=10))
    status = PasswordResetStatus.REQUESTED
