"""
API request and response models for the registry REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
employees/models.py, which own the internal domain representation. Route
handlers map between the two.

No response model has a password or password-hash field, so a stored hash can
never be serialized back to a client.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from employees.models import Employee

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


StrippedStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]


class SignupRequest(BaseModel):
    """Request body for POST /api/v1/auth/signup.

    username and email are stripped before the handler sees them, so a value
    holding only spaces arrives as "". The password is kept exactly as typed;
    signup trims it only to decide whether it is blank. Blank values are
    accepted by the model on purpose: the emptiness rule belongs to the signup
    operation and reports its own error kind, not a generic 422.
    """

    username: StrippedStr
    email: StrippedStr
    password: str = Field(max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """bcrypt hashes at most 72 bytes of input; refuse anything longer."""
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login. The password is not stripped."""

    email: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    password: str = Field(min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user account."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str


class SignupResponse(UserResponse):
    """The created user plus a bearer token bound to its id and email."""

    token: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MeResponse(BaseModel):
    """Identity carried by the caller's verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    expires_at: str


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


class EmployeeCreate(BaseModel):
    """Request body for POST /api/v1/employees. Every field is required."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    gender: str = Field(max_length=50)
    salary: float = Field(allow_inf_nan=False)


class EmployeePatch(BaseModel):
    """Request body for PATCH /api/v1/employees/{id}.

    Every field is optional. Fields left out, or sent as null, keep their
    stored value.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=1, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=50)
    salary: Optional[float] = Field(default=None, allow_inf_nan=False)

    def changes(self) -> dict:
        """Return only the fields the caller actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str
    email: str
    gender: str
    salary: float
    created_at: str
    updated_at: str

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeResponse":
        """Build the response from the domain dataclass."""
        return cls(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            gender=employee.gender,
            salary=employee.salary,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str
    version: str
    components: dict[str, str]
