from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from ..common.validators import require_non_negative
from ..core.enums import ComputationType, Role, SalaryComponentKey, WageType
from ..core.exceptions import AuthorizationError, ValidationError
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import Contribution, ProvidentFund, SalaryComponent, SalaryProfile, default_salary_profile
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

SALARY_EDITOR_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})

MONTHS_PER_YEAR = Decimal("12")
CENT = Decimal("0.01")
# Scale of the DECIMAL(18,6) wage columns.
STORAGE_SCALE = Decimal("0.000001")
BASIS_POINT = Decimal("0.01")

# The residual component is always derived, never edited.
EDITABLE_COMPONENTS = frozenset(SalaryComponentKey) - {SalaryComponentKey.FIXED_ALLOWANCE}


@dataclass(frozen=True)
class ComponentEdit:
    amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    computation_type: Optional[ComputationType] = None
    fixed_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class SalaryUpdate:
    """Partial set of overrides accepted by the salary update handler."""

    monthly_wage: Optional[Decimal] = None
    yearly_wage: Optional[Decimal] = None
    wage_type: Optional[WageType] = None
    working_days_per_week: Optional[int] = None
    break_time_hours: Optional[Decimal] = None
    components: Mapping[SalaryComponentKey, ComponentEdit] = field(default_factory=dict)
    employee_pf_percentage: Optional[Decimal] = None
    employer_pf_percentage: Optional[Decimal] = None
    professional_tax: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SalaryUpdate":
        """Parse the JSON body of a salary update (camelCase keys)."""

        payload = payload or {}

        def _number(key: str, source: Mapping[str, Any] = payload) -> Optional[Decimal]:
            value = source.get(key)
            return None if value is None else require_non_negative(value, key)

        wage_type = None
        if payload.get("wageType") is not None:
            try:
                wage_type = WageType(payload["wageType"])
            except ValueError:
                raise ValidationError(f"Unknown wage type: {payload['wageType']!r}")

        working_days = _number("workingDaysPerWeek")
        if working_days is not None and (working_days != working_days.to_integral_value() or working_days > 7):
            raise ValidationError("workingDaysPerWeek must be a whole number between 0 and 7")

        components: dict[SalaryComponentKey, ComponentEdit] = {}
        for key, raw in _object(payload.get("components"), "components").items():
            try:
                comp_key = SalaryComponentKey(key)
            except ValueError:
                continue
            if comp_key not in EDITABLE_COMPONENTS:
                continue
            components[comp_key] = _parse_component_edit(comp_key, _object(raw, f"components.{key}"))

        pf = _object(payload.get("providentFund"), "providentFund")
        employee_pf = _object(pf.get("employeeContribution"), "employeeContribution").get("percentage")
        employer_pf = _object(pf.get("employerContribution"), "employerContribution").get("percentage")

        tax = payload.get("professionalTax")
        if isinstance(tax, Mapping):
            tax = tax.get("amount")

        return cls(
            monthly_wage=_number("monthlyWage"),
            yearly_wage=_number("yearlyWage"),
            wage_type=wage_type,
            working_days_per_week=int(working_days) if working_days is not None else None,
            break_time_hours=_number("breakTimeHours"),
            components=components,
            employee_pf_percentage=_percentage(employee_pf, "employeeContribution.percentage"),
            employer_pf_percentage=_percentage(employer_pf, "employerContribution.percentage"),
            professional_tax=None if tax is None else require_non_negative(tax, "professionalTax"),
        )


def _object(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{field_name} must be an object")
    return value


def _percentage(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None:
        return None
    return require_non_negative(value, field_name).quantize(BASIS_POINT, rounding=ROUND_HALF_UP)


def _parse_component_edit(key: SalaryComponentKey, raw: Mapping[str, Any]) -> ComponentEdit:
    computation_type = None
    if raw.get("computationType") is not None:
        try:
            computation_type = ComputationType(raw["computationType"])
        except ValueError:
            raise ValidationError(f"Unknown computation type for {key.value}: {raw['computationType']!r}")

    fixed_amount = None
    if key == SalaryComponentKey.STANDARD_ALLOWANCE and raw.get("fixedAmount") is not None:
        fixed_amount = require_non_negative(raw["fixedAmount"], f"{key.value}.fixedAmount")

    return ComponentEdit(
        amount=None if raw.get("amount") is None else require_non_negative(raw["amount"], f"{key.value}.amount"),
        percentage=_percentage(raw.get("percentage"), f"{key.value}.percentage"),
        computation_type=computation_type,
        fixed_amount=fixed_amount,
    )


def apply_update(profile: SalaryProfile, changes: SalaryUpdate) -> SalaryProfile:
    """Merge overrides into a profile. Derived amounts are left for the calculator."""

    monthly, yearly = profile.monthly_wage, profile.yearly_wage
    if changes.monthly_wage is not None:
        monthly, yearly = changes.monthly_wage, changes.monthly_wage * MONTHS_PER_YEAR
    if changes.yearly_wage is not None:
        monthly = (changes.yearly_wage / MONTHS_PER_YEAR).quantize(STORAGE_SCALE, rounding=ROUND_HALF_UP)
        yearly = changes.yearly_wage

    components = dict(profile.components)
    for key, edit in changes.components.items():
        current = components[key]
        components[key] = SalaryComponent(
            amount=edit.amount if edit.amount is not None else current.amount,
            percentage=edit.percentage if edit.percentage is not None else current.percentage,
            computation_type=edit.computation_type or current.computation_type,
            fixed_amount=edit.fixed_amount if edit.fixed_amount is not None else current.fixed_amount,
        )

    pf = profile.provident_fund
    if changes.employee_pf_percentage is not None:
        pf = replace(pf, employee_contribution=replace(pf.employee_contribution, percentage=changes.employee_pf_percentage))
    if changes.employer_pf_percentage is not None:
        pf = replace(pf, employer_contribution=replace(pf.employer_contribution, percentage=changes.employer_pf_percentage))

    return replace(
        profile,
        monthly_wage=monthly,
        yearly_wage=yearly,
        wage_type=changes.wage_type or profile.wage_type,
        working_days_per_week=(
            changes.working_days_per_week if changes.working_days_per_week is not None else profile.working_days_per_week
        ),
        break_time_hours=changes.break_time_hours if changes.break_time_hours is not None else profile.break_time_hours,
        components=components,
        provident_fund=pf,
        professional_tax=changes.professional_tax if changes.professional_tax is not None else profile.professional_tax,
    )


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def _contribution_view(c: Contribution) -> dict:
    return {"amount": _money(c.amount), "percentage": _money(c.percentage)}


class SalaryProfileService:
    """Use case: read and edit an employee's salary profile."""

    def __init__(self, salaries: SalaryRepository, *, calculator: Optional[SalaryCalculator] = None):
        self._salaries = salaries
        self._calculator = calculator or StandardSalaryCalculator()

    def get_or_create(self, employee_id: int) -> SalaryProfile:
        profile = self._salaries.get_by_employee(int(employee_id))
        if profile:
            return profile

        logger.info("Creating default salary profile for employee %s", employee_id)
        self._salaries.create_if_missing(self._calculator.recompute(default_salary_profile(int(employee_id))))
        profile = self._salaries.get_by_employee(int(employee_id))
        if not profile:
            raise ValidationError("Could not create salary profile")
        return profile

    def update_salary(self, *, current_role: Role, employee_id: int, changes: SalaryUpdate) -> SalaryProfile:
        if current_role not in SALARY_EDITOR_ROLES:
            raise AuthorizationError("Only administrators can edit salary information")

        current = self._salaries.get_by_employee(int(employee_id)) or default_salary_profile(int(employee_id))
        profile = self._calculator.recompute(apply_update(current, changes))
        self._salaries.save(profile)

        if profile.overcommitted:
            logger.warning(
                "Salary components exceed monthly wage for employee %s (wage=%s); fixed allowance clamped to 0",
                employee_id,
                profile.monthly_wage,
            )
        return profile

    @staticmethod
    def breakdown(profile: SalaryProfile) -> dict:
        """Display view of a profile; amounts are rounded to cents only here."""

        components = {}
        for key, comp in profile.components.items():
            view = {
                "amount": _money(comp.amount),
                "percentage": _money(comp.percentage),
                "computationType": comp.computation_type.value,
            }
            if key == SalaryComponentKey.STANDARD_ALLOWANCE:
                view["fixedAmount"] = _money(comp.fixed_amount) if comp.fixed_amount is not None else None
            components[key.value] = view

        return {
            "wageType": profile.wage_type.value,
            "monthlyWage": _money(profile.monthly_wage),
            "yearlyWage": _money(profile.yearly_wage),
            "workingDaysPerWeek": profile.working_days_per_week,
            "breakTimeHours": _money(profile.break_time_hours),
            "components": components,
            "providentFund": {
                "employeeContribution": _contribution_view(profile.provident_fund.employee_contribution),
                "employerContribution": _contribution_view(profile.provident_fund.employer_contribution),
            },
            "professionalTax": {"amount": _money(profile.professional_tax)},
            "overcommitted": profile.overcommitted,
            "updatedAt": profile.updated_at.isoformat() if profile.updated_at else None,
        }
