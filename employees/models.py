"""
employees/models.py -- Domain dataclass for employee records.

Pure data container with zero logic. Persistence lives in employees/store.py,
transport shapes in api/models.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Employee:
    """One employee record.

    salary is conceptually non-negative but not enforced at this layer.
    email is not unique: two employees may share one.

    id is None before the record is written to the database.
    """

    first_name: str
    last_name: str
    email: str
    gender: str
    salary: float
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, bumped on every update
