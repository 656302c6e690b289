from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as seen by the attendance core.

    Note: The directory is owned elsewhere; this is a read-only projection.
    """

    employee_id: int
    full_name: str
    employee_code: str
    department: Optional[str] = None
    designation: Optional[str] = None
    role: Role = Role.EMPLOYEE
    shift_profile: Optional[str] = None
    is_active: bool = True
