"""Unit tests for JWT helpers."""

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest

from kin.config import AuthSettings
from kin.util.jwt import (
    JWTError,
    create_access_token,
    create_refresh_token,
    verify_access_token,
    verify_refresh_token,
)

SETTINGS = AuthSettings(jwt_secret="access-secret", refresh_token_secret="refresh-secret")


class TestAccessTokens:
    """Tests for access token creation and verification."""

    def test_carries_user_and_family(self):
        token = create_access_token("user-1", "family-1", SETTINGS)

        payload = verify_access_token(token, SETTINGS)

        assert payload.user_id == "user-1"
        assert payload.family_id == "family-1"
        assert payload.type == "access"

    def test_family_claim_omitted_without_active_family(self):
        token = create_access_token("user-1", None, SETTINGS)

        raw = pyjwt.decode(token, "access-secret", algorithms=["HS256"])

        assert "familyId" not in raw
        assert verify_access_token(token, SETTINGS).family_id is None

    def test_expired_token_rejected(self):
        """Should reject a token past its exp."""
        token = pyjwt.encode(
            {
                "sub": "user-1",
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(seconds=5),
            },
            "access-secret",
            algorithm="HS256",
        )

        with pytest.raises(JWTError, match="expired"):
            verify_access_token(token, SETTINGS)

    def test_wrong_secret_rejected(self):
        token = create_access_token("user-1", None, SETTINGS)
        other = AuthSettings(jwt_secret="other", refresh_token_secret="refresh-secret")

        with pytest.raises(JWTError):
            verify_access_token(token, other)

    def test_refresh_token_not_accepted_as_access(self):
        """A refresh token should not pass access verification."""
        token = create_refresh_token("user-1", SETTINGS)

        with pytest.raises(JWTError):
            verify_access_token(token, SETTINGS)


class TestRefreshTokens:
    """Tests for refresh token creation and verification."""

    def test_round_trip(self):
        token = create_refresh_token("user-1", SETTINGS)

        payload = verify_refresh_token(token, SETTINGS)

        assert payload.user_id == "user-1"
        assert payload.type == "refresh"

    def test_signed_with_separate_secret(self):
        token = create_refresh_token("user-1", SETTINGS)

        with pytest.raises(pyjwt.InvalidSignatureError):
            pyjwt.decode(token, "access-secret", algorithms=["HS256"])

    def test_access_token_not_accepted_as_refresh(self):
        same_secret = AuthSettings(jwt_secret="shared", refresh_token_secret="shared")
        token = create_access_token("user-1", None, same_secret)

        with pytest.raises(JWTError):
            verify_refresh_token(token, same_secret)
