from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..model import SalaryProfile


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary breakdowns)."""

    @abstractmethod
    def recompute(self, profile: SalaryProfile, *, now: Optional[datetime] = None) -> SalaryProfile:
        raise NotImplementedError
