"""Authentication-related Marshmallow schemas.

Field names on the wire are camelCase (``data_key``) to match the booking
frontend; attributes stay snake_case.
"""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class LoginSchema(Schema):
    """Input payload for login and password re-validation."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RegistrationSchema(Schema):
    """Input payload for self-registration."""

    first_name = fields.String(
        data_key="firstName", load_default=None, validate=validate.Length(max=100)
    )
    last_name = fields.String(
        data_key="lastName", load_default=None, validate=validate.Length(max=100)
    )
    username = fields.String(
        data_key="userName", required=True, validate=validate.Length(min=3, max=50)
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    email_confirmation = fields.String(data_key="emailConfirmation", required=True)
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    password_confirmation = fields.String(data_key="passwordConfirmation", required=True)
    phone_number = fields.String(
        data_key="phoneNumber", load_default=None, validate=validate.Length(max=32)
    )
    birth_date = fields.Date(data_key="birthDate", load_default=None)

    @validates_schema
    def _confirmations_match(self, data: dict[str, Any], **kwargs: Any) -> None:
        errors: dict[str, list[str]] = {}
        email = str(data.get("email", "")).lower()
        if email != str(data.get("email_confirmation", "")).lower():
            errors["emailConfirmation"] = ["The email and confirmation email do not match."]
        if data.get("password") != data.get("password_confirmation"):
            errors["passwordConfirmation"] = ["The password and confirmation password do not match."]
        if errors:
            raise ValidationError(errors)


class RefreshSchema(Schema):
    """Input payload for refresh-token rotation."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class ConfirmEmailSchema(Schema):
    """Input payload linking a user id to the e-mail being confirmed."""

    user_id = fields.String(data_key="userId", required=True, validate=validate.Length(max=36))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class AuthResponseSchema(Schema):
    """Response payload carrying a token pair."""

    is_auth_successful = fields.Boolean(data_key="isAuthSuccessful", dump_default=True)
    token = fields.String(attribute="access_token")
    refresh_token = fields.String(data_key="refreshToken")


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    username = fields.String(data_key="userName", required=True)
    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)
    roles = fields.List(fields.String())
    email_confirmed = fields.Boolean(data_key="emailConfirmed")


class PasswordResetRequestSchema(Schema):
    """Input payload asking for a password reset e-mail."""

    email = fields.Email(required=True, validate=validate.Length(max=254))


class PasswordResetSchema(Schema):
    """Input payload identifying a password reset entry."""

    user_id = fields.String(data_key="id", required=True, validate=validate.Length(max=36))
    token = fields.String(required=True, validate=validate.Length(min=1, max=128))


class UpdatePasswordSchema(PasswordResetSchema):
    """Input payload setting a new password through a reset entry."""

    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
