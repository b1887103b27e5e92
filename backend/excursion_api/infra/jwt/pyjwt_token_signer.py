"""HS256 access tokens with PyJWT."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import uuid4

import jwt

from excursion_api.models.base import utcnow
from excursion_api.services._shared.errors import InvalidSignatureError
from excursion_api.services._shared.ports import AccessClaims, ClaimsSource, TokenSigner

# Minimum HMAC key length accepted for HS256 (RFC 7518 section 3.2)
MIN_KEY_BYTES = 32


@dataclass(frozen=True, slots=True)
class JwtSettings:
    """
    Signing configuration.

    :param security_key: Shared HMAC secret.
    :param valid_issuer: ``iss`` written into every token.
    :param valid_audience: ``aud`` written into every token.
    :param algorithm: The single accepted algorithm.
    """

    security_key: str
    valid_issuer: str
    valid_audience: str
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if len(self.security_key.encode("utf-8")) < MIN_KEY_BYTES:
            raise ValueError(f"JWT security key must be at least {MIN_KEY_BYTES} bytes long.")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JwtSettings:
        """Build settings from a Flask config mapping."""
        return cls(
            security_key=str(config["JWT_SECURITY_KEY"]),
            valid_issuer=str(config["JWT_VALID_ISSUER"]),
            valid_audience=str(config["JWT_VALID_AUDIENCE"]),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )


class JwtTokenSigner(TokenSigner):
    """
    Adapter implementing :class:`TokenSigner` on top of PyJWT.

    Issued tokens carry ``type="access"`` and a ``jti`` so that
    ``flask-jwt-extended`` accepts them on protected endpoints.
    """

    def __init__(self, settings: JwtSettings) -> None:
        self.settings = settings

    def build_claims(self, user: ClaimsSource) -> AccessClaims:
        return AccessClaims(
            subject=str(user.id),
            email=user.email,
            roles=tuple(user.role_names),
            email_verified=bool(user.email_confirmed),
        )

    def issue_access_token(self, claims: AccessClaims, ttl: timedelta) -> str:
        """
        Sign ``claims`` into a compact JWT valid for ``ttl``.

        :param claims: Identity claims.
        :param ttl: Lifetime; negative values yield already-expired tokens.
        :returns: Encoded token.
        :rtype: str
        """
        now = utcnow()
        payload = claims.to_payload()
        payload.update(
            {
                "iss": self.settings.valid_issuer,
                "aud": self.settings.valid_audience,
                "iat": now,
                "nbf": now,
                "exp": now + ttl,
                "jti": uuid4().hex,
                "type": "access",
            }
        )
        return jwt.encode(payload, self.settings.security_key, algorithm=self.settings.algorithm)

    def validate_expired(self, token: str) -> AccessClaims:
        """
        Return the claims of a possibly expired token whose signature is valid.

        Issuer, audience and lifetime are not checked. The header algorithm
        must equal the configured one.

        :raises InvalidSignatureError: On malformed tokens, bad signatures or
            any other algorithm (``none`` included).
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != self.settings.algorithm:
                raise InvalidSignatureError("Invalid token")
            payload = jwt.decode(
                token,
                self.settings.security_key,
                algorithms=[self.settings.algorithm],
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "verify_iss": False,
                    "require": ["sub"],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidSignatureError("Invalid token") from exc
        return AccessClaims.from_payload(payload)
