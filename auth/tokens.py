"""
auth/tokens.py -- Password hashing and bearer-token utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry user_id, email, iat and exp.
       TokenService is constructed with the signing secret and lifetime, so
       nothing in this module reads configuration on its own -- the API
       lifespan builds one instance from Settings and attaches it to
       app.state.

  Verification: verify_token() raises one of three distinct error kinds
       (MissingHeader, MalformedScheme, InvalidOrExpiredToken) so callers and
       logs can tell a client that forgot the header from one holding an
       expired token. The route layer turns all three into a 401.

  Passwords: bcrypt directly (no passlib wrapper), cost factor 12. The
       _DUMMY_HASH constant enables timing equalization in
       authenticate_user() so response time does not reveal whether an email
       is registered.

Layer rule: no imports from api/ or employees/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims
from core.errors import InvalidOrExpiredToken, MalformedScheme, MissingHeader

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("registry.auth")

_ALGORITHM = "HS256"
_BEARER_PREFIX = "Bearer "
_BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes; newer releases reject longer input.
_BCRYPT_MAX_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Raises ValueError for anything bcrypt cannot hash faithfully: a non-string,
    an empty string, or more than 72 bytes once UTF-8 encoded. Signup validates
    these limits first, so reaching the error here is a programming mistake.
    """
    if not isinstance(plain, str) or not plain:
        raise ValueError("Password must be a non-empty string.")
    encoded = plain.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {_BCRYPT_MAX_BYTES} bytes.")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Never raises: a malformed hash or over-long input counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than later ones.
_DUMMY_HASH: str = hash_password("registry_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Authenticate an email/password login with timing equalization.

    Always runs bcrypt whether or not the email is registered:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ---------------------------------------------------------------------------
# Bearer tokens
# ---------------------------------------------------------------------------


class TokenService:
    """Issues and verifies HS256 bearer tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        raw = tokens.issue_token(user_id, email)
        claims = tokens.verify_token(f"Bearer {raw}")
    """

    def __init__(self, secret_key: str, expire_seconds: int = 3600) -> None:
        if len(secret_key) < 32:
            raise ValueError("secret_key must be at least 32 characters.")
        if expire_seconds <= 0:
            raise ValueError("expire_seconds must be positive.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue_token(self, user_id: str, email: str, issued_at: datetime | None = None) -> str:
        """Encode a signed JWT for the given identity.

        Args:
            user_id:   Id of the user the token is bound to.
            email:     The user's email, carried alongside the id.
            issued_at: Issue time. Defaults to now; the token expires
                       expire_seconds after it.
        """
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "user_id": user_id,
            "email": email,
            "iat": iat,
            "exp": iat + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def decode_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry of a raw token and return its claims.

        Raises InvalidOrExpiredToken on any failure, including a well-signed
        token that lacks the identity claims.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError as exc:
            raise InvalidOrExpiredToken() from exc
        user_id = payload.get("user_id")
        email = payload.get("email")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not isinstance(email, str) or not isinstance(exp, (int, float)):
            raise InvalidOrExpiredToken()
        return TokenClaims(
            user_id=user_id,
            email=email,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )

    def verify_token(self, authorization: str | None) -> TokenClaims:
        """Check a raw Authorization header value and return the token claims.

        Contract, in order:
          1. MissingHeader if the header is absent or empty.
          2. MalformedScheme unless the value is "Bearer " plus a non-empty token.
          3. InvalidOrExpiredToken if the signature or expiry check fails.
        """
        if not authorization:
            raise MissingHeader()
        if not authorization.startswith(_BEARER_PREFIX):
            raise MalformedScheme()
        token = authorization[len(_BEARER_PREFIX) :].strip()
        if not token:
            raise MalformedScheme()
        return self.decode_token(token)
