from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    e.employee_id, e.full_name, e.employee_code, d.dept_name,
    e.designation, e.role, e.shift_profile, e.is_active
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        full_name=row["full_name"],
        employee_code=row["employee_code"],
        department=row.get("dept_name"),
        designation=row.get("designation"),
        role=Role(row.get("role") or Role.EMPLOYEE.value),
        shift_profile=row.get("shift_profile"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees e
                LEFT JOIN departments d ON d.dept_id = e.dept_id
                WHERE e.employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active(self, *, exclude_roles: Collection[Role] = ()) -> Sequence[Employee]:
        clauses = ["e.is_active=1"]
        params: list[object] = []
        if exclude_roles:
            placeholders = ",".join(["%s"] * len(exclude_roles))
            clauses.append(f"e.role NOT IN ({placeholders})")
            params.extend(r.value for r in exclude_roles)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees e
                LEFT JOIN departments d ON d.dept_id = e.dept_id
                WHERE {" AND ".join(clauses)}
                ORDER BY e.full_name ASC
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]
