from __future__ import annotations

from typing import Optional, Protocol

from .model import SalaryProfile


class SalaryRepository(Protocol):
    """Persistence interface for salary profiles.

    Services depend on this interface rather than on a concrete database.
    """

    def get_by_employee(self, employee_id: int) -> Optional[SalaryProfile]:
        raise NotImplementedError

    def create_if_missing(self, profile: SalaryProfile) -> None:
        """Insert the profile unless one already exists for the employee."""

        raise NotImplementedError

    def save(self, profile: SalaryProfile) -> None:
        raise NotImplementedError
