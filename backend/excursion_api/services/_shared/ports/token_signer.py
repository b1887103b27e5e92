from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol


class ClaimsSource(Protocol):
    """Minimal user shape needed to build access-token claims."""

    id: str
    email: str
    email_confirmed: bool

    @property
    def role_names(self) -> list[str]: ...


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Identity claims carried by an access token.

    :param subject: User id (``sub``).
    :param email: User email.
    :param roles: Granted role names, one entry per role.
    :param email_verified: ``False`` marks an unconfirmed address.
    """

    subject: str
    email: str
    roles: tuple[str, ...] = ()
    email_verified: bool = True

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "sub": self.subject,
            "email": self.email,
            "roles": list(self.roles),
        }
        # Only the negative marker is emitted
        if not self.email_verified:
            payload["emailVerified"] = False
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AccessClaims:
        roles = payload.get("roles") or ()
        if isinstance(roles, str):
            roles = (roles,)
        return cls(
            subject=str(payload["sub"]),
            email=str(payload.get("email") or ""),
            roles=tuple(str(r) for r in roles),
            email_verified=payload.get("emailVerified", True) is not False,
        )


class TokenSigner(Protocol):
    """Port for minting and inspecting HMAC-signed access tokens."""

    def build_claims(self, user: ClaimsSource) -> AccessClaims: ...

    def issue_access_token(self, claims: AccessClaims, ttl: timedelta) -> str: ...

    def validate_expired(self, token: str) -> AccessClaims:
        """Verify the signature ignoring expiry; raise ``InvalidSignatureError``."""
        ...
