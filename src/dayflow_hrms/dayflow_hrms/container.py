from __future__ import annotations

from dataclasses import dataclass

from .attendance.calculator.standard_calculator import StandardWorkHoursCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import ProfileService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .salary.calculator.standard_calculator import StandardSalaryCalculator
from .salary.mysql_salary_repository import MySQLSalaryRepository
from .salary.service import SalaryProfileService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    salary_repo: MySQLSalaryRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository

    salary_service: SalaryProfileService
    attendance_service: AttendanceService
    leave_service: LeaveService
    profile_service: ProfileService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    salary_repo = MySQLSalaryRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)

    salary_service = SalaryProfileService(salary_repo, calculator=StandardSalaryCalculator())
    attendance_service = AttendanceService(
        attendance_repo,
        leave_repo,
        salary_repo,
        employees_repo,
        calculator=StandardWorkHoursCalculator(),
    )
    leave_service = LeaveService(leave_repo, employees_repo)
    profile_service = ProfileService(employees_repo, salary_service, attendance_repo, leave_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        salary_repo=salary_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        salary_service=salary_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        profile_service=profile_service,
    )
