"""Unit tests for JWTAuthProvider.

Covers:
- create_token / validate_token round trip with numeric subjects
- validate_token returning None when payload lacks sub or email
- rejection of non-numeric subjects, wrong secrets and expired tokens
"""

import pytest
from jose import jwt as jose_jwt

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: round trip
# ---------------------------------------------------------------------------


class TestCreateToken:
    async def test_should_round_trip_user_identity(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=42, email="jane@example.com", display_name="Jane")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result == user

    def test_should_encode_subject_as_string(self, hs256_provider: JWTAuthProvider):
        token = hs256_provider.create_token(TokenUser(id=7, email="a@example.com"))

        claims = jose_jwt.get_unverified_claims(token)

        assert claims["sub"] == "7"
        assert claims["email"] == "a@example.com"
        assert "exp" in claims


# ---------------------------------------------------------------------------
# Tests: validate_token returns None for missing or bad claims
# ---------------------------------------------------------------------------


class TestValidateTokenMissingClaims:
    """validate_token should return None when the decoded payload is missing
    the required 'sub' or 'email' claims."""

    async def test_should_return_none_when_token_has_no_sub_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_when_token_has_no_email_claim(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": "12", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_when_token_has_empty_sub(
        self, hs256_provider: JWTAuthProvider
    ):
        token = _make_hs256_token({"sub": "", "email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_non_numeric_subject(
        self, hs256_provider: JWTAuthProvider
    ):
        """Subjects from other identity providers (e.g. UUIDs) are rejected."""
        token = _make_hs256_token(
            {
                "sub": "6f1c1e2a-3b4d-4c5e-8f90-a1b2c3d4e5f6",
                "email": "user@example.com",
                "exp": 9999999999,
            }
        )

        assert await hs256_provider.validate_token(token) is None


class TestValidateTokenSignature:
    async def test_should_return_none_for_wrong_secret(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {"sub": "1", "email": "user@example.com", "exp": 9999999999}, secret="other"
        )

        assert await hs256_provider.validate_token(token) is None

    async def test_should_return_none_for_garbage(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not.a.jwt") is None

    async def test_should_return_none_for_expired_token(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": "1", "email": "user@example.com", "exp": 1})

        assert await hs256_provider.validate_token(token) is None


# ---------------------------------------------------------------------------
# Tests: __init__
# ---------------------------------------------------------------------------


class TestJWTAuthProviderInit:
    def test_should_store_configuration(self):
        provider = JWTAuthProvider(
            secret_key="my-secret",
            algorithm="HS256",
            expire_minutes=15,
        )

        assert provider._algorithm == "HS256"
        assert provider._secret_key == "my-secret"
        assert provider._expire_minutes == 15
