"""
api/routes/v1/employees.py -- Employee record routes.

Routes:
  GET    /employees          -- list every employee (public)
  GET    /employees/{emp_id} -- one employee (public)
  POST   /employees          -- create (requires auth)
  PATCH  /employees/{emp_id} -- partial update (requires auth)
  DELETE /employees/{emp_id} -- delete (requires auth)

Mutating routes declare require_auth as a dependency. FastAPI resolves it
before the handler body runs, so a missing, malformed or expired token aborts
the request without touching the store.

An id that is absent, or not a well-formed record id, answers 404 not_found.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.models import EmployeeCreate, EmployeePatch, EmployeeResponse, MessageResponse
from auth.dependencies import RequestContext, require_auth
from core.errors import NotFound
from employees.models import Employee
from employees.store import EmployeeStore

logger = logging.getLogger("registry.api")

router = APIRouter()


def _store(request: Request) -> EmployeeStore:
    return request.app.state.employee_store


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------


@router.get("/employees", response_model=list[EmployeeResponse])
def get_all_employees(request: Request) -> list[EmployeeResponse]:
    """Return every employee record (possibly an empty list)."""
    return [EmployeeResponse.from_employee(e) for e in _store(request).list_employees()]


@router.get("/employees/{emp_id}", response_model=EmployeeResponse)
def get_employee_by_id(request: Request, emp_id: str) -> EmployeeResponse:
    employee = _store(request).get_employee(emp_id)
    if employee is None:
        raise NotFound()
    return EmployeeResponse.from_employee(employee)


# ---------------------------------------------------------------------------
# Authenticated writes
# ---------------------------------------------------------------------------


@router.post("/employees", response_model=EmployeeResponse, status_code=201)
def add_employee(
    request: Request,
    body: EmployeeCreate,
    ctx: RequestContext = Depends(require_auth),
) -> EmployeeResponse:
    """Create an employee record from a complete set of fields."""
    store = _store(request)
    emp_id = store.create_employee(
        Employee(
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
            gender=body.gender,
            salary=body.salary,
        )
    )
    created = store.get_employee(emp_id)
    if created is None:
        # Deleted by a concurrent request between insert and read-back.
        raise NotFound()
    logger.info("Employee %s created by user %s", emp_id, ctx.claims.user_id)
    return EmployeeResponse.from_employee(created)


@router.patch("/employees/{emp_id}", response_model=EmployeeResponse)
def update_employee(
    request: Request,
    emp_id: str,
    body: EmployeePatch,
    ctx: RequestContext = Depends(require_auth),
) -> EmployeeResponse:
    """Change only the supplied fields; everything else keeps its value."""
    changes = body.changes()
    updated = _store(request).update_employee(emp_id, **changes)
    if updated is None:
        raise NotFound()
    logger.info("Employee %s updated by user %s (fields=%s)", emp_id, ctx.claims.user_id, sorted(changes))
    return EmployeeResponse.from_employee(updated)


@router.delete("/employees/{emp_id}", response_model=MessageResponse)
def delete_employee(
    request: Request,
    emp_id: str,
    ctx: RequestContext = Depends(require_auth),
) -> MessageResponse:
    if not _store(request).delete_employee(emp_id):
        raise NotFound()
    logger.info("Employee %s deleted by user %s", emp_id, ctx.claims.user_id)
    return MessageResponse(message="Employee deleted successfully")
