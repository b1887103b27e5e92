"""Refresh-token rotation endpoint."""

from __future__ import annotations

from flask import Blueprint, Response

from excursion_api.api.deps import get_auth_service, get_json_body, json_response, timing
from excursion_api.schemas import AuthResponseSchema, RefreshSchema
from excursion_api.services.auth import RefreshIn

bp = Blueprint("token", __name__)

refresh_schema = RefreshSchema()
auth_response_schema = AuthResponseSchema()


@bp.post("/refresh")
@timing
def refresh():
    """Exchange an expired access token and an active refresh token for a new pair.

    Failures answer ``401`` with a plain-text reason.
    """

    data = refresh_schema.load(get_json_body())
    result = get_auth_service().refresh(
        RefreshIn(access_token=data["access_token"], refresh_token=data["refresh_token"])
    )
    if not result.ok:
        return Response(result.message, status=401, mimetype="text/plain")
    return json_response(auth_response_schema.dump(result.value))
