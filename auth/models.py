"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors
employees/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or employees/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account.

    hashed_password is the bcrypt hash; the plaintext is never stored. API
    response models deliberately have no field for it, so it cannot leak
    through serialization.

    id is None before the record is written to the database.
    """

    username: str
    email: str  # unique across users
    hashed_password: str
    id: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity decoded from a verified bearer token."""

    user_id: str
    email: str
    expires_at: datetime
