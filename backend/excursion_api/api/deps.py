"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import verify_jwt_in_request

from excursion_api.infra.jwt.pyjwt_token_signer import JwtSettings, JwtTokenSigner
from excursion_api.services.auth import AuthService, AuthTokenConfig

F = TypeVar("F", bound=Callable[..., Any])

AUTH_SERVICE_KEY = "auth_service"


def get_auth_service() -> AuthService:
    """Return the app-wide :class:`AuthService`, building it on first use.

    Settings are read from the Flask config once and injected, so the service
    itself never touches global configuration.
    """

    service = current_app.extensions.get(AUTH_SERVICE_KEY)
    if service is None:
        service = AuthService(
            signer=JwtTokenSigner(JwtSettings.from_config(current_app.config)),
            token_cfg=AuthTokenConfig.from_config(current_app.config),
            logger=current_app.logger,
        )
        current_app.extensions[AUTH_SERVICE_KEY] = service
    return cast(AuthService, service)


def get_json_body() -> dict[str, Any]:
    """Return the JSON request body, or an empty dict when absent or invalid."""

    return request.get_json(silent=True) or {}


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def errors_response(*messages: str, status: int = 400) -> Response:
    """Return the ``{"errors": [...]}`` body used by account endpoints."""

    return json_response({"errors": list(messages)}, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
