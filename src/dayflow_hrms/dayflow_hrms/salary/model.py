from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..core.constants import (
    DEFAULT_BREAK_TIME_HOURS,
    DEFAULT_COMPONENTS,
    DEFAULT_PF_PERCENTAGE,
    DEFAULT_PROFESSIONAL_TAX,
    DEFAULT_STANDARD_ALLOWANCE,
    DEFAULT_WORKING_DAYS_PER_WEEK,
)
from ..core.enums import ComputationType, SalaryComponentKey, WageType

ZERO = Decimal("0")


@dataclass(frozen=True)
class SalaryComponent:
    """One named salary component.

    `amount` is derived by the calculator; only components in fixed mode keep
    an amount that was entered directly.
    """

    amount: Decimal
    percentage: Decimal
    computation_type: ComputationType
    fixed_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Contribution:
    amount: Decimal
    percentage: Decimal = DEFAULT_PF_PERCENTAGE


@dataclass(frozen=True)
class ProvidentFund:
    employee_contribution: Contribution
    employer_contribution: Contribution


@dataclass(frozen=True)
class SalaryProfile:
    """Salary profile owned by one employee record."""

    employee_id: int
    monthly_wage: Decimal
    yearly_wage: Decimal
    components: Mapping[SalaryComponentKey, SalaryComponent]
    provident_fund: ProvidentFund
    wage_type: WageType = WageType.FIXED
    working_days_per_week: int = DEFAULT_WORKING_DAYS_PER_WEEK
    break_time_hours: Decimal = DEFAULT_BREAK_TIME_HOURS
    professional_tax: Decimal = DEFAULT_PROFESSIONAL_TAX
    overcommitted: bool = False
    updated_at: Optional[datetime] = field(default=None, compare=False)
    created_at: Optional[datetime] = field(default=None, compare=False)

    def component(self, key: SalaryComponentKey) -> SalaryComponent:
        return self.components[key]


def default_components() -> dict[SalaryComponentKey, SalaryComponent]:
    out: dict[SalaryComponentKey, SalaryComponent] = {}
    for key, (percentage, computation_type) in DEFAULT_COMPONENTS.items():
        fixed_amount = DEFAULT_STANDARD_ALLOWANCE if key == SalaryComponentKey.STANDARD_ALLOWANCE else None
        out[key] = SalaryComponent(
            amount=ZERO,
            percentage=percentage,
            computation_type=computation_type,
            fixed_amount=fixed_amount,
        )
    return out


def default_salary_profile(employee_id: int) -> SalaryProfile:
    """Zero-wage profile created the first time an employee profile is read."""

    return SalaryProfile(
        employee_id=int(employee_id),
        monthly_wage=ZERO,
        yearly_wage=ZERO,
        components=default_components(),
        provident_fund=ProvidentFund(
            employee_contribution=Contribution(amount=ZERO),
            employer_contribution=Contribution(amount=ZERO),
        ),
    )
