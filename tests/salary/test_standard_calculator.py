from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest

from src.dayflow_hrms.dayflow_hrms.core.enums import ComputationType, SalaryComponentKey as K
from src.dayflow_hrms.dayflow_hrms.core.exceptions import InvalidProfile
from src.dayflow_hrms.dayflow_hrms.salary.calculator.standard_calculator import StandardSalaryCalculator
from src.dayflow_hrms.dayflow_hrms.salary.model import default_salary_profile

NOW = datetime(2026, 3, 1, 10, 0)


def _with_wage(wage, employee_id=1):
    return replace(default_salary_profile(employee_id), monthly_wage=Decimal(wage), yearly_wage=Decimal(wage) * 12)


def _set_component(profile, key, **changes):
    components = dict(profile.components)
    components[key] = replace(components[key], **changes)
    return replace(profile, components=components)


def test_default_breakdown_for_50000():
    p = StandardSalaryCalculator().recompute(_with_wage("50000"), now=NOW)

    assert p.component(K.BASIC_SALARY).amount == Decimal("25000")
    assert p.component(K.HOUSE_RENT_ALLOWANCE).amount == Decimal("12500")
    assert p.component(K.STANDARD_ALLOWANCE).amount == Decimal("4167")
    assert p.component(K.PERFORMANCE_BONUS).amount == Decimal("2082.5")
    assert p.component(K.LEAVE_TRAVEL_ALLOWANCE).amount == Decimal("2082.5")
    assert p.component(K.FIXED_ALLOWANCE).amount == Decimal("4168")
    assert p.provident_fund.employee_contribution.amount == Decimal("3000")
    assert p.provident_fund.employer_contribution.amount == Decimal("3000")
    assert p.overcommitted is False
    assert p.updated_at == NOW


def test_residual_absorbs_exactly_the_rest_of_the_wage():
    p = StandardSalaryCalculator().recompute(_with_wage("73421.37"), now=NOW)

    total = sum(c.amount for c in p.components.values())
    assert total == Decimal("73421.37")


def test_zero_wage_has_no_division_by_zero():
    p = StandardSalaryCalculator().recompute(_with_wage("0"), now=NOW)

    assert p.component(K.BASIC_SALARY).amount == 0
    assert p.component(K.HOUSE_RENT_ALLOWANCE).amount == 0
    assert p.component(K.FIXED_ALLOWANCE).amount == 0
    assert p.component(K.FIXED_ALLOWANCE).percentage == 0
    # The fixed standard allowance alone exceeds a zero wage.
    assert p.overcommitted is True


def test_negative_wage_is_treated_as_zero():
    p = StandardSalaryCalculator().recompute(_with_wage("-500"), now=NOW)

    assert p.component(K.BASIC_SALARY).amount == 0
    assert p.component(K.FIXED_ALLOWANCE).amount == 0
    assert p.component(K.FIXED_ALLOWANCE).percentage == 0


def test_overcommitted_components_clamp_fixed_allowance_to_zero():
    profile = _set_component(_with_wage("1000"), K.BASIC_SALARY, percentage=Decimal("200"))

    p = StandardSalaryCalculator().recompute(profile, now=NOW)

    assert p.component(K.BASIC_SALARY).amount == Decimal("2000")
    assert p.component(K.FIXED_ALLOWANCE).amount == 0
    assert p.overcommitted is True


def test_hra_is_a_share_of_basic_not_of_wage():
    profile = _set_component(_with_wage("40000"), K.BASIC_SALARY, percentage=Decimal("40"))

    p = StandardSalaryCalculator().recompute(profile, now=NOW)

    assert p.component(K.BASIC_SALARY).amount == Decimal("16000")
    assert p.component(K.HOUSE_RENT_ALLOWANCE).amount == Decimal("8000")
    assert p.provident_fund.employee_contribution.amount == Decimal("1920")


def test_fixed_mode_components_keep_their_amount():
    profile = _set_component(
        _with_wage("50000"), K.BASIC_SALARY, computation_type=ComputationType.FIXED, amount=Decimal("30000")
    )
    profile = _set_component(
        profile, K.HOUSE_RENT_ALLOWANCE, computation_type=ComputationType.FIXED, amount=Decimal("5000")
    )

    p = StandardSalaryCalculator().recompute(profile, now=NOW)

    assert p.component(K.BASIC_SALARY).amount == Decimal("30000")
    assert p.component(K.HOUSE_RENT_ALLOWANCE).amount == Decimal("5000")
    # Bonus still follows the (fixed) basic.
    assert p.component(K.PERFORMANCE_BONUS).amount == Decimal("2499.0")


def test_standard_allowance_in_percentage_mode_uses_wage():
    profile = _set_component(_with_wage("60000"), K.STANDARD_ALLOWANCE, computation_type=ComputationType.PERCENTAGE)

    p = StandardSalaryCalculator().recompute(profile, now=NOW)

    assert p.component(K.STANDARD_ALLOWANCE).amount == Decimal("60000") * Decimal("16.67") / 100


def test_standard_allowance_uses_fixed_amount_override():
    profile = _set_component(_with_wage("50000"), K.STANDARD_ALLOWANCE, fixed_amount=Decimal("5000"))

    p = StandardSalaryCalculator().recompute(profile, now=NOW)

    assert p.component(K.STANDARD_ALLOWANCE).amount == Decimal("5000")
    assert p.component(K.FIXED_ALLOWANCE).amount == Decimal("3335")


def test_recompute_is_idempotent():
    calc = StandardSalaryCalculator()
    once = calc.recompute(_with_wage("61234.56"), now=NOW)
    twice = calc.recompute(once, now=NOW)

    assert once == twice


def test_missing_component_raises_invalid_profile():
    profile = _with_wage("50000")
    components = dict(profile.components)
    del components[K.PERFORMANCE_BONUS]

    with pytest.raises(InvalidProfile):
        StandardSalaryCalculator().recompute(replace(profile, components=components), now=NOW)


def test_unknown_computation_type_raises_invalid_profile():
    profile = _set_component(_with_wage("50000"), K.BASIC_SALARY, computation_type="weird")

    with pytest.raises(InvalidProfile):
        StandardSalaryCalculator().recompute(profile, now=NOW)
