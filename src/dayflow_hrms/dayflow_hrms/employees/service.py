from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LEAVE_TOTALS
from ..core.enums import Role, WorkStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..salary.service import SalaryProfileService
from .model import Employee
from .permissions import PROFILE_FIELDS, can_edit_other_profiles, editable_fields
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

GENDERS = frozenset({"male", "female", "other", ""})
MARITAL_STATUSES = frozenset({"single", "married", "divorced", "widowed", ""})

_DATE_FIELDS = frozenset({"date_of_birth", "date_of_joining"})
_UPPERCASE_FIELDS = frozenset({"login_id", "ifsc_code", "pan_number"})
_LOWERCASE_FIELDS = frozenset({"email", "personal_email"})
_REQUIRED_FIELDS = frozenset({"first_name", "last_name"})

# Fields an administrator fills in when adding an employee.
ONBOARDING_FIELDS = ("firstName", "lastName", "email", "phone", "department", "designation", "yearOfJoining")


def _coerce(attr: str, value: Any) -> Any:
    if attr in _DATE_FIELDS:
        return parse_iso_date(value) if value else None

    if attr == "year_of_joining":
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("yearOfJoining must be a year")

    text = "" if value is None else str(value).strip()
    if attr in _REQUIRED_FIELDS:
        return require_non_empty(text, attr)
    if attr == "gender" and text not in GENDERS:
        raise ValidationError(f"Unknown gender: {text!r}")
    if attr == "marital_status" and text not in MARITAL_STATUSES:
        raise ValidationError(f"Unknown marital status: {text!r}")
    if attr in _UPPERCASE_FIELDS:
        text = text.upper()
    if attr in _LOWERCASE_FIELDS:
        text = text.lower()
    if attr in {"avatar", "gender", "marital_status"}:
        return text
    return text or None


def employee_to_dict(e: Employee) -> dict:
    out = {"id": e.employee_id, "role": e.role.value, "isActive": e.is_active}
    for api_name, attr in PROFILE_FIELDS.items():
        value = getattr(e, attr)
        out[api_name] = value.isoformat() if isinstance(value, date) else value
    return out


def resolve_work_status(*, checked_in: bool, on_leave: bool) -> WorkStatus:
    """Approved leave wins over presence, presence over absence."""
    if on_leave:
        return WorkStatus.ON_LEAVE
    if checked_in:
        return WorkStatus.PRESENT
    return WorkStatus.ABSENT


class ProfileService:
    """Use case: view and edit employee profiles, employee directory."""

    def __init__(
        self,
        employees: EmployeeRepository,
        salary_service: SalaryProfileService,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
    ):
        self._employees = employees
        self._salary = salary_service
        self._attendance = attendance
        self._leaves = leaves

    def get_in_company(self, employee_id: int, company_id: Optional[int]) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee or (company_id is not None and employee.company_id != company_id):
            raise NotFoundError("Employee not found")
        return employee

    def get_profile(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        current_company_id: Optional[int],
        employee_id: int,
    ) -> dict:
        employee = self.get_in_company(employee_id, current_company_id)

        salary = None
        if can_edit_other_profiles(current_role) or int(current_user_id) == employee.employee_id:
            salary = self._salary.breakdown(self._salary.get_or_create(employee.employee_id))

        return {"profile": employee_to_dict(employee), "salary": salary}

    def update_profile(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        current_company_id: Optional[int],
        employee_id: int,
        changes: Mapping[str, Any],
    ) -> Employee:
        if not can_edit_other_profiles(current_role) and int(current_user_id) != int(employee_id):
            raise AuthorizationError("You can only edit your own profile")

        employee = self.get_in_company(employee_id, current_company_id)

        allowed = editable_fields(current_role)
        fields: dict[str, Any] = {}
        for api_name, value in (changes or {}).items():
            attr = PROFILE_FIELDS.get(api_name)
            if attr is None or attr not in allowed:
                continue
            fields[attr] = _coerce(attr, value)

        if fields and not self._employees.update_fields(employee.employee_id, fields):
            raise ValidationError("Profile update failed")

        logger.info("Profile %s updated by %s: %s", employee.employee_id, current_user_id, sorted(fields))
        return self._employees.get_by_id(employee.employee_id) or employee

    def list_directory(self, *, company_id: int, today: Optional[date] = None) -> list[dict]:
        today = today or date.today()
        employees = self._employees.list_active(company_id=int(company_id))
        ids = [e.employee_id for e in employees]

        present = {r.employee_id for r in self._attendance.list_for_date(today, employee_ids=ids) if r.check_in_time}
        on_leave = {
            lv.employee_id
            for lv in self._leaves.list_approved_overlapping(employee_ids=ids, start_date=today, end_date=today)
        }

        out = []
        for e in employees:
            row = employee_to_dict(e)
            row["workStatus"] = resolve_work_status(
                checked_in=e.employee_id in present,
                on_leave=e.employee_id in on_leave,
            ).value
            out.append(row)
        return out

    def create_employee(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        current_company_id: Optional[int],
        payload: Mapping[str, Any],
        login_id: str,
        password_hash: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Employee:
        """Add an employee to the administrator's company.

        Login id and credential hash are issued by the authentication layer and
        passed through unchanged (the login id is only upper-cased).
        """
        if not can_edit_other_profiles(current_role):
            raise AuthorizationError("Only administrators can add employees")
        if current_company_id is None:
            raise ValidationError("Administrator is not attached to a company")

        payload = payload or {}
        today = today or date.today()

        fields: dict[str, Any] = {}
        for api_name in ONBOARDING_FIELDS:
            value = payload.get(api_name)
            attr = PROFILE_FIELDS[api_name]
            if value is not None or attr in _REQUIRED_FIELDS:
                fields[attr] = _coerce(attr, value)

        if not fields.get("email"):
            raise ValidationError("email is required")
        if self._employees.get_by_email(fields["email"]):
            raise ValidationError("Email already registered")

        login_id = require_non_empty(login_id, "loginId").upper()
        if self._employees.get_by_login_id(login_id):
            raise ValidationError("Login ID already in use")

        fields.setdefault("year_of_joining", today.year)

        employee_id = self._employees.create(
            company_id=int(current_company_id),
            role=Role.EMPLOYEE,
            login_id=login_id,
            password_hash=password_hash,
            created_by=int(current_user_id),
            fields=fields,
        )
        self._salary.get_or_create(employee_id)
        self._leaves.create_allocation_if_missing(employee_id=employee_id, year=today.year, totals=DEFAULT_LEAVE_TOTALS)

        logger.info("Employee %s (%s) added to company %s by %s", employee_id, login_id, current_company_id, current_user_id)
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError("Could not create employee")
        return employee
