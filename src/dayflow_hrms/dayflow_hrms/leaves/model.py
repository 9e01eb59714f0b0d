from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.enums import LeaveStatus, LeaveType


def allocation_days(start_date: date, end_date: date) -> int:
    """Calendar days spanned by a request, both ends included."""
    return abs((end_date - start_date).days) + 1


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    allocation: int
    status: LeaveStatus
    created_at: datetime
    reason: Optional[str] = None
    remarks: Optional[str] = None
    attachment: Optional[str] = None
    admin_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class LeaveBalance:
    total: int
    used: int

    @property
    def available(self) -> int:
        return max(0, self.total - self.used)


@dataclass(frozen=True)
class LeaveAllocation:
    """Per-employee ledger: one balance per leave type."""

    employee_id: int
    year: int
    balances: Mapping[LeaveType, LeaveBalance]

    def balance(self, leave_type: LeaveType) -> LeaveBalance:
        return self.balances.get(leave_type) or LeaveBalance(total=0, used=0)
