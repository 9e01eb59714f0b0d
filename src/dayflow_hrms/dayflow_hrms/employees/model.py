from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: a user of one company (tenant).

    Note: credentials live with the authentication layer, not here.
    """

    employee_id: int
    company_id: Optional[int]
    role: Role
    first_name: str
    last_name: str
    year_of_joining: int
    login_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: str = ""
    department: Optional[str] = None
    designation: Optional[str] = None
    manager: Optional[str] = None
    location: Optional[str] = None
    date_of_joining: Optional[date] = None
    date_of_birth: Optional[date] = None
    residing_address: Optional[str] = None
    nationality: Optional[str] = None
    personal_email: Optional[str] = None
    gender: str = ""
    marital_status: str = ""
    bank_account_number: Optional[str] = None
    bank_name: Optional[str] = None
    ifsc_code: Optional[str] = None
    pan_number: Optional[str] = None
    uan_number: Optional[str] = None
    employee_code: Optional[str] = None
    about: Optional[str] = None
    job_description: Optional[str] = None
    interests: Optional[str] = None
    is_active: bool = True
    created_by: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
