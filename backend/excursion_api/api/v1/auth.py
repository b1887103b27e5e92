"""Account endpoints: login, registration, password and e-mail checks."""

from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import get_jwt_identity

from excursion_api.api.deps import (
    errors_response,
    get_auth_service,
    get_json_body,
    json_response,
    require_auth,
    timing,
)
from excursion_api.core.errors import Unauthorized
from excursion_api.schemas import (
    AuthResponseSchema,
    ConfirmEmailSchema,
    LoginSchema,
    RegistrationSchema,
    WhoAmISchema,
)
from excursion_api.services.auth import ConfirmEmailIn, LoginIn, RegisterIn

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
registration_schema = RegistrationSchema()
confirm_email_schema = ConfirmEmailSchema()
auth_response_schema = AuthResponseSchema()
whoami_schema = WhoAmISchema()


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    data = login_schema.load(get_json_body())
    result = get_auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    if not result.ok:
        return json_response({"isAuthSuccessful": False, "errorMessage": result.message}, status=401)
    return json_response(auth_response_schema.dump(result.value))


@bp.post("/registration")
@timing
def registration():
    """Register a ``CandidateUser`` and sign it in."""

    data = registration_schema.load(get_json_body())
    dto = RegisterIn(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        phone_number=data["phone_number"],
        birth_date=data["birth_date"],
    )
    result = get_auth_service().register(dto)
    if not result.ok:
        return errors_response(result.message)
    return json_response(auth_response_schema.dump(result.value))


@bp.post("/validate-password")
@timing
def validate_password():
    """Re-check the password of an active user before a sensitive change."""

    data = login_schema.load(get_json_body())
    result = get_auth_service().validate_password(
        LoginIn(email=data["email"], password=data["password"])
    )
    if not result.ok:
        return errors_response(result.message)
    return json_response({"isAuthSuccessful": True})


@bp.post("/validate-id-with-email")
@timing
def validate_id_with_email():
    """Confirm the e-mail address of the user identified by ``userId``."""

    data = confirm_email_schema.load(get_json_body())
    result = get_auth_service().confirm_email(
        ConfirmEmailIn(user_id=data["user_id"], email=data["email"])
    )
    if not result.ok:
        return errors_response(result.message)
    return json_response({"emailHasBeenConfirmed": True})


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the authenticated user profile."""

    result = get_auth_service().whoami(str(get_jwt_identity()))
    if not result.ok:
        raise Unauthorized(result.message)
    return json_response(whoami_schema.dump(result.value))
