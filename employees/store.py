"""
employees/store.py -- SQLAlchemy-backed persistence layer for employee records.

Uses SQLAlchemy Core (not ORM) so the dataclass in employees/models.py stays
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. EmployeeStore is the repository;
_row_to_employee is the mapper. Route handlers never touch SQL directly.

Absent records are reported with None/False, never with an exception. A
malformed id is indistinguishable from an absent one -- the store answers
without querying.

Each partial update is a single UPDATE statement, so concurrent updates to
the same record never interleave field by field.

Usage:
    store = EmployeeStore("sqlite:///./registry.db")
    emp_id = store.create_employee(employee)
    store.update_employee(emp_id, salary=55000.0)
    store.delete_employee(emp_id)
    store.close()
"""

from typing import Optional

from sqlalchemy import Column, Float, MetaData, String, Table, text
from sqlalchemy.engine import Engine

from core.errors import StoreUnavailable
from core.storage import create_store_engine, is_valid_id, new_id, now_iso, store_errors
from employees.models import Employee

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_employees = Table(
    "employees",
    _metadata,
    Column("id", String(24), primary_key=True),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("gender", String(50), nullable=False),
    Column("salary", Float, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# Fields a partial update may change. id and timestamps are store-owned.
UPDATABLE_FIELDS = ("first_name", "last_name", "email", "gender", "salary")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EmployeeStore:
    def __init__(self, db_url: str) -> None:
        self.engine: Engine = create_store_engine(db_url)
        with store_errors("employees.create_schema"):
            _metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with store_errors("employees.ping"), self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except StoreUnavailable:
            return False
        return True

    def create_employee(self, employee: Employee) -> str:
        """Insert a new employee and return its generated id."""
        emp_id = new_id()
        stamp = now_iso()
        with store_errors("employees.insert"), self.engine.connect() as conn:
            conn.execute(
                _employees.insert().values(
                    id=emp_id,
                    first_name=employee.first_name,
                    last_name=employee.last_name,
                    email=employee.email,
                    gender=employee.gender,
                    salary=float(employee.salary),
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
        return emp_id

    def get_employee(self, emp_id: str) -> Optional[Employee]:
        """Return the employee with this id, or None if absent or the id is malformed."""
        if not is_valid_id(emp_id):
            return None
        with store_errors("employees.get"), self.engine.connect() as conn:
            row = conn.execute(_employees.select().where(_employees.c.id == emp_id)).fetchone()
        return _row_to_employee(row) if row is not None else None

    def list_employees(self) -> list[Employee]:
        """Return every employee in creation order."""
        with store_errors("employees.list"), self.engine.connect() as conn:
            rows = conn.execute(_employees.select().order_by(_employees.c.created_at, _employees.c.id)).fetchall()
        return [_row_to_employee(r) for r in rows]

    def update_employee(self, emp_id: str, **fields) -> Optional[Employee]:
        """Apply a partial update and return the updated employee.

        Only the keyword arguments given are written; every other column keeps
        its value. Field names outside UPDATABLE_FIELDS raise ValueError.
        With no fields this is a plain read.

        Returns None if no employee has this id.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown employee fields: {unknown!r}")
        if not is_valid_id(emp_id):
            return None
        if not fields:
            return self.get_employee(emp_id)
        if "salary" in fields:
            fields["salary"] = float(fields["salary"])
        with store_errors("employees.update"), self.engine.connect() as conn:
            result = conn.execute(
                _employees.update().where(_employees.c.id == emp_id).values(updated_at=now_iso(), **fields)
            )
            conn.commit()
        if result.rowcount == 0:
            return None
        return self.get_employee(emp_id)

    def delete_employee(self, emp_id: str) -> bool:
        """Permanently delete an employee. Returns True if deleted, False if not found."""
        if not is_valid_id(emp_id):
            return False
        with store_errors("employees.delete"), self.engine.connect() as conn:
            result = conn.execute(_employees.delete().where(_employees.c.id == emp_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_employee(row) -> Employee:
    return Employee(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        gender=row.gender,
        salary=row.salary,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
