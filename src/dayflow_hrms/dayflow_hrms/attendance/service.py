from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_clock, format_hours, month_bounds, overlap_days
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import resolve_work_status
from ..leaves.repository import LeaveRepository
from ..salary.repository import SalaryRepository
from .calculator.base import WorkHoursCalculator
from .calculator.standard_calculator import StandardWorkHoursCalculator
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def record_to_dict(r: Optional[AttendanceRecord]) -> Optional[dict]:
    if r is None:
        return None
    return {
        "id": r.attendance_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "checkInTime": r.check_in_time.isoformat() if r.check_in_time else None,
        "checkOutTime": r.check_out_time.isoformat() if r.check_out_time else None,
        "workHours": format_hours(r.work_hours),
        "extraHours": format_hours(r.extra_hours),
        "status": r.status.value,
    }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[WorkHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._salaries = salaries
        self._employees = employees
        self._calculator = calculator or StandardWorkHoursCalculator()

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or datetime.now()
        today = now.date()

        if self._leaves.find_approved_on(employee_id=int(employee_id), day=today):
            raise ValidationError("Cannot check in while on approved leave")

        existing = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if existing and existing.check_in_time:
            raise ValidationError("Already checked in today")

        if not self._attendance.create_checkin(employee_id=int(employee_id), work_date=today, check_in_time=now):
            raise ValidationError("Already checked in today")

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record:
            raise ValidationError("Check-in failed")
        return record

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or datetime.now()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record or not record.check_in_time:
            raise ValidationError("Please check in first before checking out")
        if record.check_out_time is not None:
            raise ValidationError("Already checked out today")

        profile = self._salaries.get_by_employee(int(employee_id))
        hours = self._calculator.compute(
            record.check_in_time,
            now,
            break_hours=profile.break_time_hours if profile else None,
        )

        ok = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            work_hours=hours.work_hours,
            extra_hours=hours.extra_hours,
        )
        if not ok:
            raise ValidationError("Already checked out today")

        logger.info(
            "Employee %s checked out: work=%s extra=%s", employee_id, hours.work_hours, hours.extra_hours
        )
        return self._attendance.get_for_employee_and_date(int(employee_id), today) or record

    def get_today(self, employee_id: int, *, today: Optional[date] = None) -> dict:
        today = today or date.today()
        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        leave = self._leaves.find_approved_on(employee_id=int(employee_id), day=today)
        return {
            "attendance": record_to_dict(record),
            "onLeave": leave is not None,
            "leave": (
                {
                    "id": leave.request_id,
                    "leaveType": leave.leave_type.value,
                    "startDate": leave.start_date.strftime("%Y-%m-%d"),
                    "endDate": leave.end_date.strftime("%Y-%m-%d"),
                }
                if leave
                else None
            ),
        }

    def get_month(self, employee_id: int, *, year: int, month: int) -> dict:
        first, last = month_bounds(year, month)
        records = self._attendance.list_for_employee(int(employee_id), start_date=first, end_date=last)
        leaves = self._leaves.list_approved_overlapping(employee_ids=[int(employee_id)], start_date=first, end_date=last)

        rows = [
            {
                "date": r.work_date.strftime("%Y-%m-%d"),
                "checkIn": format_clock(r.check_in_time),
                "checkOut": format_clock(r.check_out_time),
                "workHours": format_hours(r.work_hours),
                "extraHours": format_hours(r.extra_hours),
                "status": r.status.value,
            }
            for r in sorted(records, key=lambda r: r.work_date)
        ]

        return {
            "month": f"{year:04d}-{month:02d}",
            "attendance": rows,
            "summary": {
                "presentDays": sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
                "leaveDays": sum(overlap_days(lv.start_date, lv.end_date, first, last) for lv in leaves),
                "totalDays": (last - first).days + 1,
            },
        }

    def get_admin_day(self, *, company_id: int, work_date: date, search: str = "") -> dict:
        employees = self._employees.list_active(company_id=int(company_id), search=(search or "").strip())
        ids = [e.employee_id for e in employees]

        records = {r.employee_id: r for r in self._attendance.list_for_date(work_date, employee_ids=ids)}
        on_leave = {
            lv.employee_id
            for lv in self._leaves.list_approved_overlapping(employee_ids=ids, start_date=work_date, end_date=work_date)
        }

        rows = []
        for e in employees:
            r = records.get(e.employee_id)
            rows.append(
                {
                    "employee": {
                        "id": e.employee_id,
                        "name": e.full_name,
                        "email": e.email,
                        "loginId": e.login_id,
                        "avatar": e.avatar,
                        "department": e.department,
                        "designation": e.designation,
                    },
                    "checkIn": format_clock(r.check_in_time) if r else None,
                    "checkOut": format_clock(r.check_out_time) if r else None,
                    "workHours": format_hours(r.work_hours) if r else None,
                    "extraHours": format_hours(r.extra_hours) if r else None,
                    "status": resolve_work_status(
                        checked_in=bool(r and r.check_in_time),
                        on_leave=e.employee_id in on_leave,
                    ).value,
                }
            )

        return {"date": work_date.strftime("%Y-%m-%d"), "attendance": rows}
