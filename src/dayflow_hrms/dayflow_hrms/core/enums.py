from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class WageType(str, Enum):
    FIXED = "fixed"
    HOURLY = "hourly"


class ComputationType(str, Enum):
    """How a salary component amount is obtained."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class SalaryComponentKey(str, Enum):
    """The six salary components, in evaluation order."""

    BASIC_SALARY = "basicSalary"
    HOUSE_RENT_ALLOWANCE = "houseRentAllowance"
    STANDARD_ALLOWANCE = "standardAllowance"
    PERFORMANCE_BONUS = "performanceBonus"
    LEAVE_TRAVEL_ALLOWANCE = "leaveTravelAllowance"
    FIXED_ALLOWANCE = "fixedAllowance"


class AttendanceStatus(str, Enum):
    """Attendance status stored on the daily record."""

    PRESENT = "present"
    ABSENT = "absent"


class WorkStatus(str, Enum):
    """Derived status shown in directories and daily views."""

    PRESENT = "present"
    ABSENT = "absent"
    ON_LEAVE = "on_leave"


class LeaveType(str, Enum):
    PAID_TIME_OFF = "paid_time_off"
    SICK_LEAVE = "sick_leave"
    UNPAID_LEAVE = "unpaid_leave"


class LeaveStatus(str, Enum):
    """Approval workflow status of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
