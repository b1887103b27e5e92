"""Unit tests for the PyJWT access-token signer."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from excursion_api.infra.jwt.pyjwt_token_signer import JwtSettings, JwtTokenSigner
from excursion_api.services._shared.errors import InvalidSignatureError
from excursion_api.services._shared.ports import AccessClaims

KEY = "unit-test-signing-key-with-enough-entropy-0123456789"
ISSUER = "excursion-api"
AUDIENCE = "excursion-frontend"


@pytest.fixture()
def signer() -> JwtTokenSigner:
    return JwtTokenSigner(JwtSettings(security_key=KEY, valid_issuer=ISSUER, valid_audience=AUDIENCE))


@pytest.fixture()
def claims() -> AccessClaims:
    return AccessClaims(subject="user-1", email="ana@example.com", roles=("User", "Administrator"))


def _user(**overrides):
    data = {
        "id": "user-1",
        "email": "ana@example.com",
        "role_names": ["CandidateUser"],
        "email_confirmed": True,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


class TestJwtSettings:
    def test_short_key_is_rejected(self):
        with pytest.raises(ValueError, match="at least 32 bytes"):
            JwtSettings(security_key="too-short", valid_issuer=ISSUER, valid_audience=AUDIENCE)

    def test_from_config(self):
        settings = JwtSettings.from_config(
            {"JWT_SECURITY_KEY": KEY, "JWT_VALID_ISSUER": "iss", "JWT_VALID_AUDIENCE": "aud"}
        )
        assert settings.valid_issuer == "iss"
        assert settings.valid_audience == "aud"
        assert settings.algorithm == "HS256"


class TestIssueAccessToken:
    def test_payload_carries_identity_and_registered_claims(self, signer, claims):
        token = signer.issue_access_token(claims, timedelta(minutes=15))

        payload = jwt.decode(token, KEY, algorithms=["HS256"], audience=AUDIENCE, issuer=ISSUER)
        assert payload["sub"] == "user-1"
        assert payload["email"] == "ana@example.com"
        assert payload["roles"] == ["User", "Administrator"]
        assert payload["type"] == "access"
        assert payload["exp"] - payload["iat"] == 15 * 60
        assert payload["jti"]
        assert "emailVerified" not in payload
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_each_token_has_its_own_jti(self, signer, claims):
        first = jwt.decode(
            signer.issue_access_token(claims, timedelta(minutes=1)),
            options={"verify_signature": False},
        )
        second = jwt.decode(
            signer.issue_access_token(claims, timedelta(minutes=1)),
            options={"verify_signature": False},
        )
        assert first["jti"] != second["jti"]

    def test_unconfirmed_email_is_marked(self, signer):
        claims = signer.build_claims(_user(email_confirmed=False))
        token = signer.issue_access_token(claims, timedelta(minutes=1))

        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload["emailVerified"] is False
        assert payload["roles"] == ["CandidateUser"]


class TestValidateExpired:
    def test_accepts_expired_token_with_valid_signature(self, signer, claims):
        token = signer.issue_access_token(claims, timedelta(minutes=-1))

        with pytest.raises(jwt.ExpiredSignatureError):
            jwt.decode(token, KEY, algorithms=["HS256"], audience=AUDIENCE)
        assert signer.validate_expired(token) == claims

    def test_ignores_issuer_and_audience(self, claims):
        other = JwtTokenSigner(
            JwtSettings(security_key=KEY, valid_issuer="elsewhere", valid_audience="someone")
        )
        token = other.issue_access_token(claims, timedelta(minutes=5))

        assert JwtTokenSigner(
            JwtSettings(security_key=KEY, valid_issuer=ISSUER, valid_audience=AUDIENCE)
        ).validate_expired(token).subject == "user-1"

    def test_rejects_other_secret(self, signer, claims):
        forged = JwtTokenSigner(
            JwtSettings(security_key=KEY[::-1], valid_issuer=ISSUER, valid_audience=AUDIENCE)
        ).issue_access_token(claims, timedelta(minutes=5))

        with pytest.raises(InvalidSignatureError):
            signer.validate_expired(forged)

    def test_rejects_other_algorithm(self, signer):
        token = jwt.encode({"sub": "user-1"}, KEY, algorithm="HS512")
        with pytest.raises(InvalidSignatureError):
            signer.validate_expired(token)

    def test_rejects_unsigned_token(self, signer):
        token = jwt.encode({"sub": "user-1"}, None, algorithm="none")
        with pytest.raises(InvalidSignatureError):
            signer.validate_expired(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_rejects_malformed_tokens(self, signer, token):
        with pytest.raises(InvalidSignatureError):
            signer.validate_expired(token)

    def test_requires_subject(self, signer):
        token = jwt.encode({"email": "ana@example.com"}, KEY, algorithm="HS256")
        with pytest.raises(InvalidSignatureError):
            signer.validate_expired(token)


class TestAccessClaims:
    def test_single_role_string_is_accepted(self):
        claims = AccessClaims.from_payload({"sub": "u", "email": "e@example.com", "roles": "User"})
        assert claims.roles == ("User",)
        assert claims.email_verified is True

    def test_email_verified_marker_round_trip(self):
        claims = AccessClaims(subject="u", email="e@example.com", email_verified=False)
        assert AccessClaims.from_payload(claims.to_payload()) == claims
