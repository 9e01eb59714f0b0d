"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import ComputationType, LeaveType, SalaryComponentKey

DEFAULT_WORKING_DAYS_PER_WEEK = 5
DEFAULT_BREAK_TIME_HOURS = Decimal("1")
STANDARD_WORK_HOURS = Decimal("8")

DEFAULT_STANDARD_ALLOWANCE = Decimal("4167")
DEFAULT_PF_PERCENTAGE = Decimal("12")
DEFAULT_PROFESSIONAL_TAX = Decimal("200")

# (percentage, computation type) per component
DEFAULT_COMPONENTS = {
    SalaryComponentKey.BASIC_SALARY: (Decimal("50"), ComputationType.PERCENTAGE),
    SalaryComponentKey.HOUSE_RENT_ALLOWANCE: (Decimal("50"), ComputationType.PERCENTAGE),
    SalaryComponentKey.STANDARD_ALLOWANCE: (Decimal("16.67"), ComputationType.FIXED),
    SalaryComponentKey.PERFORMANCE_BONUS: (Decimal("8.33"), ComputationType.PERCENTAGE),
    SalaryComponentKey.LEAVE_TRAVEL_ALLOWANCE: (Decimal("8.33"), ComputationType.PERCENTAGE),
    SalaryComponentKey.FIXED_ALLOWANCE: (Decimal("0"), ComputationType.FIXED),
}

DEFAULT_LEAVE_TOTALS = {
    LeaveType.PAID_TIME_OFF: 24,
    LeaveType.SICK_LEAVE: 7,
    LeaveType.UNPAID_LEAVE: 0,
}

# Leave types whose approval is charged against the allocation ledger.
LEDGER_LEAVE_TYPES = frozenset({LeaveType.PAID_TIME_OFF, LeaveType.SICK_LEAVE})

DEFAULT_HISTORY_LIMIT = 200
