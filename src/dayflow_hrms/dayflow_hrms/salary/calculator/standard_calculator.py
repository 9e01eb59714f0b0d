from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ...core.constants import DEFAULT_STANDARD_ALLOWANCE
from ...core.enums import ComputationType, SalaryComponentKey
from ...core.exceptions import InvalidProfile
from ..model import Contribution, ProvidentFund, SalaryComponent, SalaryProfile
from .base import SalaryCalculator

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _percent_of(base: Decimal, percentage: Decimal) -> Decimal:
    return base * percentage / HUNDRED


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule set.

    Basic and standard allowance are taken from the monthly wage; HRA, bonus,
    LTA and both PF contributions from the basic amount. Fixed allowance
    absorbs what is left of the wage and never goes below 0. Amounts are kept
    unrounded.
    """

    def recompute(self, profile: SalaryProfile, *, now: Optional[datetime] = None) -> SalaryProfile:
        self._validate(profile)

        wage = profile.monthly_wage if profile.monthly_wage and profile.monthly_wage > 0 else ZERO
        c = profile.components

        basic = c[SalaryComponentKey.BASIC_SALARY]
        if basic.computation_type == ComputationType.PERCENTAGE:
            basic = replace(basic, amount=_percent_of(wage, basic.percentage))

        hra = self._from_basic(c[SalaryComponentKey.HOUSE_RENT_ALLOWANCE], basic.amount)

        standard = c[SalaryComponentKey.STANDARD_ALLOWANCE]
        if standard.computation_type == ComputationType.FIXED:
            standard = replace(standard, amount=standard.fixed_amount or DEFAULT_STANDARD_ALLOWANCE)
        else:
            standard = replace(standard, amount=_percent_of(wage, standard.percentage))

        bonus = self._from_basic(c[SalaryComponentKey.PERFORMANCE_BONUS], basic.amount)
        lta = self._from_basic(c[SalaryComponentKey.LEAVE_TRAVEL_ALLOWANCE], basic.amount)

        others = basic.amount + hra.amount + standard.amount + bonus.amount + lta.amount
        residual = wage - others
        fixed_amount = residual if residual > 0 else ZERO
        fixed = replace(
            c[SalaryComponentKey.FIXED_ALLOWANCE],
            amount=fixed_amount,
            percentage=(fixed_amount / wage * HUNDRED) if wage > 0 else ZERO,
        )

        pf = profile.provident_fund
        provident_fund = ProvidentFund(
            employee_contribution=Contribution(
                amount=_percent_of(basic.amount, pf.employee_contribution.percentage),
                percentage=pf.employee_contribution.percentage,
            ),
            employer_contribution=Contribution(
                amount=_percent_of(basic.amount, pf.employer_contribution.percentage),
                percentage=pf.employer_contribution.percentage,
            ),
        )

        return replace(
            profile,
            components={
                SalaryComponentKey.BASIC_SALARY: basic,
                SalaryComponentKey.HOUSE_RENT_ALLOWANCE: hra,
                SalaryComponentKey.STANDARD_ALLOWANCE: standard,
                SalaryComponentKey.PERFORMANCE_BONUS: bonus,
                SalaryComponentKey.LEAVE_TRAVEL_ALLOWANCE: lta,
                SalaryComponentKey.FIXED_ALLOWANCE: fixed,
            },
            provident_fund=provident_fund,
            overcommitted=others > wage,
            updated_at=now or datetime.now(),
        )

    @staticmethod
    def _from_basic(component: SalaryComponent, basic_amount: Decimal) -> SalaryComponent:
        if component.computation_type != ComputationType.PERCENTAGE:
            return component
        return replace(component, amount=_percent_of(basic_amount, component.percentage))

    @staticmethod
    def _validate(profile: SalaryProfile) -> None:
        components = profile.components or {}
        missing = [key.value for key in SalaryComponentKey if key not in components]
        if missing:
            raise InvalidProfile(f"Missing salary components: {', '.join(missing)}")

        for key in SalaryComponentKey:
            comp = components[key]
            if not isinstance(comp, SalaryComponent):
                raise InvalidProfile(f"Malformed salary component: {key.value}")
            if not isinstance(comp.computation_type, ComputationType):
                raise InvalidProfile(f"Unknown computation type for {key.value}: {comp.computation_type!r}")

        pf = profile.provident_fund
        if pf is None or pf.employee_contribution is None or pf.employer_contribution is None:
            raise InvalidProfile("Missing provident fund contributions")
