"""
core/errors.py -- Error kinds surfaced by the registry operations.

Every failure an operation can report to its caller is one of these classes.
Each carries the HTTP status and machine-readable code the API layer puts in
the error envelope, so route handlers raise domain errors and never build
HTTP responses for them by hand (see api.main.registry_error_handler).

Layer rule: core/ is the kernel -- no imports from api/, auth/ or employees/.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for every error kind the API reports to callers."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class EmptyField(RegistryError):
    status_code = 400
    code = "empty_field"
    default_message = "Username, email, and password must not be empty."


class DuplicateEmail(RegistryError):
    status_code = 409
    code = "duplicate_email"
    default_message = "A user with this email already exists."


class NotFound(RegistryError):
    status_code = 404
    code = "not_found"
    default_message = "Employee not found."


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class AuthError(RegistryError):
    """Any failure of the bearer-token check. Always a 401."""

    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."


class MissingHeader(AuthError):
    code = "missing_header"
    default_message = "Authorization header must be provided."


class MalformedScheme(AuthError):
    code = "malformed_scheme"
    default_message = "Authentication token must be 'Bearer [token]'."


class InvalidOrExpiredToken(AuthError):
    code = "invalid_or_expired_token"
    default_message = "Invalid/Expired token."


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class StoreUnavailable(RegistryError):
    status_code = 503
    code = "store_unavailable"
    default_message = "The record store is unavailable."
