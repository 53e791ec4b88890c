"""Unit tests for auth/tokens.py -- password hashing and the bearer-token contract.

Covers:
- hash_password / verify_password round trip and failure modes
- TokenService.issue_token() claims map back to the same user id and email
- verify_token() error kinds, in contract order: missing header, malformed
  scheme, invalid or expired token
- tokens older than the configured lifetime are rejected
- authenticate_user() for known, unknown and wrong-password logins
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.models import User
from auth.tokens import TokenService, authenticate_user, hash_password, verify_password
from core.errors import InvalidOrExpiredToken, MalformedScheme, MissingHeader

USER_ID = "0123456789abcdef01234567"

# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")
        assert verify_password("correct horse", hashed) is True

    def test_wrong_password_returns_false(self) -> None:
        hashed = hash_password("correct horse")
        assert verify_password("battery staple", hashed) is False

    def test_malformed_hash_returns_false_instead_of_raising(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize("bad", ["", None, 12345])
    def test_hash_rejects_empty_or_non_string(self, bad) -> None:
        with pytest.raises(ValueError):
            hash_password(bad)

    def test_hash_rejects_input_over_72_bytes(self) -> None:
        with pytest.raises(ValueError):
            hash_password("x" * 73)

    def test_same_password_hashes_differently(self) -> None:
        """Each hash carries its own salt."""
        assert hash_password("repeat") != hash_password("repeat")


# ---------------------------------------------------------------------------
# Token issue / verify
# ---------------------------------------------------------------------------


class TestTokenService:
    def test_issued_token_maps_back_to_identity(self, token_service: TokenService) -> None:
        token = token_service.issue_token(USER_ID, "ann@x.com")
        claims = token_service.verify_token(f"Bearer {token}")
        assert claims.user_id == USER_ID
        assert claims.email == "ann@x.com"

    def test_expiry_is_one_hour_after_issue(self, token_service: TokenService) -> None:
        issued = datetime.now(timezone.utc).replace(microsecond=0)
        token = token_service.issue_token(USER_ID, "ann@x.com", issued_at=issued)
        claims = token_service.decode_token(token)
        assert claims.expires_at == issued + timedelta(hours=1)

    def test_missing_header(self, token_service: TokenService) -> None:
        with pytest.raises(MissingHeader):
            token_service.verify_token(None)

    def test_empty_header_counts_as_missing(self, token_service: TokenService) -> None:
        with pytest.raises(MissingHeader):
            token_service.verify_token("")

    @pytest.mark.parametrize("header", ["Token abc.def.ghi", "bearer abc.def.ghi", "Bearer", "Bearer ", "Bearer    "])
    def test_malformed_scheme(self, token_service: TokenService, header: str) -> None:
        with pytest.raises(MalformedScheme):
            token_service.verify_token(header)

    def test_garbage_token_is_invalid(self, token_service: TokenService) -> None:
        with pytest.raises(InvalidOrExpiredToken):
            token_service.verify_token("Bearer not.a.jwt")

    def test_token_signed_with_other_secret_is_invalid(self, token_service: TokenService) -> None:
        other = TokenService("z" * 64)
        token = other.issue_token(USER_ID, "ann@x.com")
        with pytest.raises(InvalidOrExpiredToken):
            token_service.verify_token(f"Bearer {token}")

    def test_token_older_than_an_hour_is_expired(self, token_service: TokenService) -> None:
        issued = datetime.now(timezone.utc) - timedelta(hours=1, seconds=5)
        token = token_service.issue_token(USER_ID, "ann@x.com", issued_at=issued)
        with pytest.raises(InvalidOrExpiredToken):
            token_service.verify_token(f"Bearer {token}")

    def test_token_just_inside_lifetime_is_accepted(self, token_service: TokenService) -> None:
        issued = datetime.now(timezone.utc) - timedelta(minutes=59)
        token = token_service.issue_token(USER_ID, "ann@x.com", issued_at=issued)
        assert token_service.verify_token(f"Bearer {token}").user_id == USER_ID

    def test_well_signed_token_without_identity_claims_is_invalid(self) -> None:
        secret = "s" * 40
        service = TokenService(secret)
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"sub": "someone", "exp": exp}, secret, algorithm="HS256")
        with pytest.raises(InvalidOrExpiredToken):
            service.verify_token(f"Bearer {token}")

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenService("too-short")

    def test_non_positive_lifetime_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenService("k" * 32, expire_seconds=0)


# ---------------------------------------------------------------------------
# authenticate_user
# ---------------------------------------------------------------------------


class TestAuthenticateUser:
    def test_valid_credentials_return_user(self, user_store) -> None:
        user_store.create_user(User(username="ann", email="ann@x.com", hashed_password=hash_password("pw-123")))
        user = authenticate_user(user_store, "ann@x.com", "pw-123")
        assert user is not None
        assert user.username == "ann"

    def test_wrong_password_returns_none(self, user_store) -> None:
        user_store.create_user(User(username="ann", email="ann@x.com", hashed_password=hash_password("pw-123")))
        assert authenticate_user(user_store, "ann@x.com", "nope") is None

    def test_unknown_email_returns_none(self, user_store) -> None:
        assert authenticate_user(user_store, "ghost@x.com", "pw-123") is None
