"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as employees/store.py).
UserStore is the repository; _row_to_user is the mapper. Route and
dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(email) is enforced in SQL. signup checks get_by_email() first for a
  friendly error, and create_user() converts the IntegrityError raised when
  two concurrent signups race past that check into DuplicateEmail.

Layer rule: no imports from api/ or employees/.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, String, Table, Text, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.errors import DuplicateEmail, StoreUnavailable
from core.storage import create_store_engine, is_valid_id, new_id, now_iso, store_errors

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(24), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)

# Columns update_user() may touch. id and created_at are immutable.
_MUTABLE_FIELDS = frozenset({"username", "email", "hashed_password"})


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities (the credential store).

    Usage:
        store = UserStore("sqlite:///./registry.db")
        uid = store.create_user(User(username="ann", email="ann@x.com", hashed_password=hash_password("secret")))
        user = store.get_by_email("ann@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = create_store_engine(db_url)
        with store_errors("users.create_schema"):
            _metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with store_errors("users.ping"), self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except StoreUnavailable:
            return False
        return True

    def create_user(self, user: User) -> str:
        """Insert a new user and return its generated id.

        Raises DuplicateEmail if the email is already registered.
        """
        user_id = new_id()
        try:
            with store_errors("users.insert"), self.engine.connect() as conn:
                conn.execute(
                    _users.insert().values(
                        id=user_id,
                        username=user.username,
                        email=user.email,
                        hashed_password=user.hashed_password,
                        created_at=now_iso(),
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateEmail() from exc
        return user_id

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by id. Returns None if absent or the id is malformed."""
        if not is_valid_id(user_id):
            return None
        with store_errors("users.get_by_id"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with store_errors("users.get_by_email"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def list_users(self) -> list[User]:
        """Return all users in signup order."""
        with store_errors("users.list"), self.engine.connect() as conn:
            rows = conn.execute(_users.select().order_by(_users.c.created_at, _users.c.id)).fetchall()
        return [_row_to_user(r) for r in rows]

    def update_user(self, user_id: str, **fields) -> User | None:
        """Update a subset of mutable fields. Returns the updated user, or None if absent.

        Unknown field names raise ValueError rather than being silently ignored.
        """
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {unknown!r}")
        if not is_valid_id(user_id):
            return None
        if fields:
            try:
                with store_errors("users.update"), self.engine.connect() as conn:
                    result = conn.execute(_users.update().where(_users.c.id == user_id).values(**fields))
                    conn.commit()
            except IntegrityError as exc:
                raise DuplicateEmail() from exc
            if result.rowcount == 0:
                return None
        return self.get_by_id(user_id)

    def delete_user(self, user_id: str) -> bool:
        """Permanently delete a user. Returns True if deleted, False if not found."""
        if not is_valid_id(user_id):
            return False
        with store_errors("users.delete"), self.engine.connect() as conn:
            result = conn.execute(_users.delete().where(_users.c.id == user_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )
