"""Unit tests for JWTService."""

from datetime import timedelta

import jwt
import pytest

from humans.infrastructure.auth import InvalidTokenError, JWTService, TokenExpiredError, TokenType


@pytest.fixture
def service():
    return JWTService(secret_key="test-secret")


class TestAccessTokens:
    def test_claims(self, service):
        token = service.create_access_token(user_id="u1", email="a@example.com")
        claims = service.validate_access_token(token)

        assert claims.user_id == "u1"
        assert claims.email == "a@example.com"
        assert claims.token_type is TokenType.ACCESS
        assert service.decode_token(token)["iss"] == "humans.inc"

    def test_token_without_type_is_rejected(self, service):
        token = jwt.encode(
            {"sub": "u1", "iss": "humans.inc", "exp": 4102444800}, "test-secret", algorithm="HS256"
        )
        with pytest.raises(InvalidTokenError):
            service.validate_access_token(token)

    def test_expired_token(self, service):
        token = service.create_access_token(
            user_id="u1", email="a@example.com", expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(TokenExpiredError):
            service.validate_access_token(token)

    def test_refresh_token_is_not_an_access_token(self, service):
        token = service.create_refresh_token(user_id="u1", email="a@example.com")
        with pytest.raises(InvalidTokenError):
            service.validate_access_token(token)

    def test_wrong_secret(self, service):
        token = JWTService(secret_key="other").create_access_token(user_id="u1", email="a@x.io")
        with pytest.raises(InvalidTokenError):
            service.validate_access_token(token)


class TestRefreshTokens:
    def test_refresh_claims(self, service):
        token = service.create_refresh_token(user_id="u1", email="a@example.com")

        assert service.validate_refresh_token(token).token_type is TokenType.REFRESH

    def test_refresh_tokens_are_unique(self, service):
        first = service.create_refresh_token(user_id="u1", email="a@example.com")
        second = service.create_refresh_token(user_id="u1", email="a@example.com")
        assert first != second

    def test_access_token_is_not_a_refresh_token(self, service):
        token = service.create_access_token(user_id="u1", email="a@example.com")
        with pytest.raises(InvalidTokenError):
            service.validate_refresh_token(token)


def test_expires_in_uses_settings(service):
    assert service.get_expires_in() == 60 * 60
    assert service.get_expires_in(timedelta(minutes=5)) == 300
