from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..model import WorkHours


class WorkHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def compute(
        self,
        check_in: datetime,
        check_out: Optional[datetime],
        *,
        break_hours: Optional[Decimal] = None,
    ) -> WorkHours:
        raise NotImplementedError
