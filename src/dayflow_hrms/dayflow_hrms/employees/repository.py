from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, company_id: int, search: str = "") -> Sequence[Employee]:
        """Active employees (role=employee) of a company, ordered by name."""

        raise NotImplementedError

    def update_fields(self, employee_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_login_id(self, login_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        role: Role,
        login_id: str,
        password_hash: Optional[str],
        created_by: int,
        fields: Mapping[str, Any],
    ) -> int:
        """Insert an active employee and return its id."""

        raise NotImplementedError
