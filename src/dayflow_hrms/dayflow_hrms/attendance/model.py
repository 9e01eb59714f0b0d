from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class WorkHours:
    total_hours: Decimal
    work_hours: Decimal
    extra_hours: Decimal


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    work_hours: Decimal = ZERO
    extra_hours: Decimal = ZERO
