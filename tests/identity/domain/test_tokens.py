"""Tests for bearer token issuance and verification."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from storefront.config import get_settings
from storefront.identity.exceptions import AuthenticationFailed
from storefront.identity.passwords import hash_password
from storefront.identity.tokens import decode_token, issue_token
from storefront.identity.user import Role, User


@pytest.fixture()
def user():
    return User.register(
        email="token@example.com",
        password_hash=hash_password("Secret#123"),
        first_name="Tok",
        last_name="En",
        role=Role.SELLER.value,
    )


def _encode(claims, secret=None):
    settings = get_settings()
    return jwt.encode(claims, secret or settings.jwt_secret_key, algorithm="HS256")


class TestIssueToken:
    def test_claims(self, user):
        issued = issue_token(user)
        claims = decode_token(issued.token)

        assert claims["sub"] == str(user.id)
        assert claims["name"] == "Tok En"
        assert claims["email"] == "token@example.com"
        assert claims["role"] == "Seller"

    def test_expiry_follows_settings(self, user):
        before = datetime.now(UTC)
        issued = issue_token(user)
        expected = before + timedelta(minutes=get_settings().jwt_expiration_minutes)
        assert abs((issued.expires - expected).total_seconds()) < 5

    def test_refresh_token_is_opaque_and_unique(self, user):
        assert issue_token(user).refresh_token != issue_token(user).refresh_token


class TestDecodeToken:
    def _claims(self, **overrides):
        settings = get_settings()
        claims = {
            "sub": "user-1",
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "exp": datetime.now(UTC) + timedelta(minutes=5),
        }
        claims.update(overrides)
        return claims

    def test_expired_token(self):
        token = _encode(self._claims(exp=datetime.now(UTC) - timedelta(minutes=1)))
        with pytest.raises(AuthenticationFailed) as exc:
            decode_token(token)
        assert exc.value.message == "Token has expired"

    def test_wrong_secret(self):
        token = _encode(self._claims(), secret="not-the-secret")
        with pytest.raises(AuthenticationFailed) as exc:
            decode_token(token)
        assert exc.value.message == "Invalid token"

    def test_wrong_audience(self):
        with pytest.raises(AuthenticationFailed):
            decode_token(_encode(self._claims(aud="someone-else")))

    def test_wrong_issuer(self):
        with pytest.raises(AuthenticationFailed):
            decode_token(_encode(self._claims(iss="someone-else")))

    def test_garbage(self):
        with pytest.raises(AuthenticationFailed):
            decode_token("not-a-jwt")
