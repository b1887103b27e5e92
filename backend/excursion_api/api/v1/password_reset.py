"""Password reset endpoints: request, validate and consume a reset entry."""

from __future__ import annotations

from flask import Blueprint

from excursion_api.api.deps import (
    errors_response,
    get_auth_service,
    get_json_body,
    json_response,
    timing,
)
from excursion_api.schemas import (
    PasswordResetRequestSchema,
    PasswordResetSchema,
    UpdatePasswordSchema,
)
from excursion_api.services.auth import PasswordResetIn, UpdatePasswordIn

bp = Blueprint("password_reset", __name__)

request_schema = PasswordResetRequestSchema()
reset_schema = PasswordResetSchema()
update_schema = UpdatePasswordSchema()


@bp.post("/reset")
@timing
def reset():
    """Open a reset entry for the e-mail; always 200 so addresses stay private."""

    data = request_schema.load(get_json_body())
    result = get_auth_service().request_password_reset(data["email"])
    if not result.ok:
        return errors_response(result.message)
    return json_response({})


@bp.post("/validate-reset")
@timing
def validate_reset():
    data = reset_schema.load(get_json_body())
    result = get_auth_service().validate_password_reset(
        PasswordResetIn(user_id=data["user_id"], token=data["token"])
    )
    if not result.ok:
        return errors_response(result.message)
    return json_response({})


@bp.post("/update-password")
@timing
def update_password():
    """Replace the password of the entry's user and consume the entry."""

    data = update_schema.load(get_json_body())
    result = get_auth_service().update_password(
        UpdatePasswordIn(user_id=data["user_id"], token=data["token"], password=data["password"])
    )
    if not result.ok:
        return errors_response(result.message)
    return json_response({})
