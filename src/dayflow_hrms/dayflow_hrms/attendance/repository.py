from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date, *, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, *, employee_id: int, work_date: date, check_in_time: datetime) -> bool:
        """Insert a present record; False when the employee already checked in that day."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        work_hours: Decimal,
        extra_hours: Decimal,
    ) -> bool:
        """Close an open record; False when it was already closed."""

        raise NotImplementedError
