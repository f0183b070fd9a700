"""Tests for token issuance and verification."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt as pyjwt
import pytest
from pydantic import SecretStr

from slotlist_service.core.settings import AuthSettings
from slotlist_service.infra.auth import JWTCodec, TokenValidationError

SECRET = "codec-test-secret-0123456789abcdef"


@pytest.fixture
def settings() -> AuthSettings:
    return AuthSettings(secret=SecretStr(SECRET))


@pytest.fixture
def jwt_codec(settings: AuthSettings) -> JWTCodec:
    return JWTCodec(settings)


@pytest.mark.unit
class TestJWTCodec:
    def test_issue_and_decode(self, jwt_codec: JWTCodec) -> None:
        uid = uuid4()

        token = jwt_codec.issue(uid, "MorpheusXAUT", ["community.sel.founder", "admin.announcement"])
        payload = jwt_codec.decode(token)

        assert payload.sub == str(uid)
        assert payload.user.uid == uid
        assert payload.user.nickname == "MorpheusXAUT"
        assert payload.permissions == ["community.sel.founder", "admin.announcement"]
        assert payload.iss == "https://api.slotlist.info"
        assert payload.aud == "https://api.slotlist.info"

    def test_default_lifetime(self, jwt_codec: JWTCodec, settings: AuthSettings) -> None:
        now = datetime.now(UTC).replace(microsecond=0)

        payload = jwt_codec.decode(jwt_codec.issue(uuid4(), "Nick", [], now=now))

        assert payload.exp == int(now.timestamp()) + settings.expires_in_seconds

    def test_expired_token(self, jwt_codec: JWTCodec) -> None:
        token = jwt_codec.issue(
            uuid4(),
            "Nick",
            [],
            now=datetime.now(UTC) - timedelta(hours=2),
            expires_in=timedelta(hours=1),
        )

        with pytest.raises(TokenValidationError, match="expired"):
            jwt_codec.decode(token)

    def test_token_not_yet_valid(self, jwt_codec: JWTCodec) -> None:
        token = jwt_codec.issue(uuid4(), "Nick", [], now=datetime.now(UTC) + timedelta(hours=1))

        with pytest.raises(TokenValidationError):
            jwt_codec.decode(token)

    def test_wrong_secret(self, jwt_codec: JWTCodec) -> None:
        other = JWTCodec(AuthSettings(secret=SecretStr("another-secret-entirely-0123456789")))

        with pytest.raises(TokenValidationError):
            jwt_codec.decode(other.issue(uuid4(), "Nick", []))

    def test_wrong_audience(self, jwt_codec: JWTCodec) -> None:
        other = JWTCodec(AuthSettings(secret=SecretStr(SECRET), audience="https://other.example"))

        with pytest.raises(TokenValidationError, match="audience"):
            jwt_codec.decode(other.issue(uuid4(), "Nick", []))

    def test_wrong_issuer(self, jwt_codec: JWTCodec) -> None:
        other = JWTCodec(AuthSettings(secret=SecretStr(SECRET), issuer="https://other.example"))

        with pytest.raises(TokenValidationError, match="issuer"):
            jwt_codec.decode(other.issue(uuid4(), "Nick", []))

    def test_garbage(self, jwt_codec: JWTCodec) -> None:
        with pytest.raises(TokenValidationError):
            jwt_codec.decode("definitely.not.a-jwt")

    def test_malformed_payload(self, jwt_codec: JWTCodec, settings: AuthSettings) -> None:
        now = datetime.now(UTC)
        token = pyjwt.encode(
            {
                "sub": "someone",
                "aud": settings.audience,
                "iss": settings.issuer,
                "exp": now + timedelta(hours=1),
                "permissions": ["admin.announcement"],
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(TokenValidationError, match="Malformed"):
            jwt_codec.decode(token)

    def test_algorithm_outside_allow_list(self, settings: AuthSettings) -> None:
        issuer = JWTCodec(AuthSettings(secret=SecretStr(SECRET), algorithms=["HS512"]))
        verifier = JWTCodec(settings)

        with pytest.raises(TokenValidationError):
            verifier.decode(issuer.issue(uuid4(), "Nick", []))
