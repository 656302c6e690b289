from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_SHIFT_PROFILE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .reports.service import AttendanceReportService
from .shifts.model import ShiftPolicy
from .shifts.profiles import get_policy


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    default_policy: ShiftPolicy

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository

    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_container(
    *,
    db_config: dict,
    shift_profile: str = DEFAULT_SHIFT_PROFILE,
    overtime_policy: str | None = None,
    standard_hours: float | None = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    policy = get_policy(shift_profile, overtime_policy=overtime_policy, standard_hours=standard_hours)

    def policy_loader(name: str) -> ShiftPolicy:
        return get_policy(name, standard_hours=standard_hours)

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        default_policy=policy,
        strategy_factory=AttendanceStrategyFactory(),
        policy_loader=policy_loader,
    )
    report_service = AttendanceReportService(
        attendance_repo,
        employees_repo,
        default_policy=policy,
        policy_loader=policy_loader,
    )

    return Container(
        conn=conn,
        default_policy=policy,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        report_service=report_service,
    )
