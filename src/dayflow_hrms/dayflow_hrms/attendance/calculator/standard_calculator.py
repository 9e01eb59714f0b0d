from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ...core.constants import DEFAULT_BREAK_TIME_HOURS, STANDARD_WORK_HOURS
from ..model import WorkHours
from .base import WorkHoursCalculator

ZERO = Decimal("0")
SECONDS_PER_HOUR = Decimal("3600")


class StandardWorkHoursCalculator(WorkHoursCalculator):
    """Standard rule: (out - in) - break, not below 0; anything over 8 h is extra."""

    def __init__(self, *, standard_hours: Decimal = STANDARD_WORK_HOURS):
        self._standard_hours = Decimal(standard_hours)

    def compute(
        self,
        check_in: datetime,
        check_out: Optional[datetime],
        *,
        break_hours: Optional[Decimal] = None,
    ) -> WorkHours:
        if not check_in or not check_out:
            return WorkHours(total_hours=ZERO, work_hours=ZERO, extra_hours=ZERO)

        breaks = DEFAULT_BREAK_TIME_HOURS if break_hours is None else Decimal(break_hours)

        total = Decimal(str((check_out - check_in).total_seconds())) / SECONDS_PER_HOUR
        work = max(ZERO, total - breaks)
        extra = max(ZERO, work - self._standard_hours)
        return WorkHours(total_hours=total, work_hours=work, extra_hours=extra)
