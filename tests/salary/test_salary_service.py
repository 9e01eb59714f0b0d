from __future__ import annotations

from decimal import Decimal

import pytest

from src.dayflow_hrms.dayflow_hrms.core.enums import ComputationType, Role, SalaryComponentKey as K, WageType
from src.dayflow_hrms.dayflow_hrms.core.exceptions import AuthorizationError, ValidationError
from src.dayflow_hrms.dayflow_hrms.salary.service import SalaryProfileService, SalaryUpdate

from tests.fakes import FakeSalaryRepo


def _service():
    repo = FakeSalaryRepo()
    return SalaryProfileService(repo), repo


def test_get_or_create_persists_zero_wage_default_once():
    svc, repo = _service()

    first = svc.get_or_create(7)
    second = svc.get_or_create(7)

    assert first.monthly_wage == 0
    assert first.component(K.STANDARD_ALLOWANCE).amount == Decimal("4167")
    assert second is first
    assert list(repo.profiles) == [7]


def test_monthly_wage_derives_yearly_and_recomputes():
    svc, repo = _service()

    p = svc.update_salary(
        current_role=Role.ADMIN,
        employee_id=3,
        changes=SalaryUpdate.from_payload({"monthlyWage": 50000}),
    )

    assert p.yearly_wage == Decimal("600000")
    assert p.component(K.FIXED_ALLOWANCE).amount == Decimal("4168")
    assert repo.profiles[3] == p


def test_yearly_wage_derives_monthly():
    svc, _ = _service()

    p = svc.update_salary(
        current_role=Role.SUPER_ADMIN,
        employee_id=3,
        changes=SalaryUpdate.from_payload({"yearlyWage": "720000"}),
    )

    assert p.monthly_wage == Decimal("60000")
    assert p.component(K.BASIC_SALARY).amount == Decimal("30000")


def test_monthly_wage_from_uneven_yearly_fits_storage_scale():
    svc, repo = _service()

    p = svc.update_salary(
        current_role=Role.ADMIN,
        employee_id=3,
        changes=SalaryUpdate.from_payload({"yearlyWage": 100000}),
    )

    assert p.monthly_wage == Decimal("8333.333333")
    assert p.monthly_wage.as_tuple().exponent == -6
    assert p.yearly_wage == Decimal("100000")
    assert repo.profiles[3].monthly_wage == p.monthly_wage


def test_yearly_wage_wins_when_both_are_sent():
    svc, _ = _service()

    p = svc.update_salary(
        current_role=Role.ADMIN,
        employee_id=3,
        changes=SalaryUpdate.from_payload({"monthlyWage": 10000, "yearlyWage": 240000}),
    )

    assert p.monthly_wage == Decimal("20000")
    assert p.yearly_wage == Decimal("240000")


def test_component_and_pf_edits_are_merged():
    svc, _ = _service()
    payload = {
        "monthlyWage": 50000,
        "wageType": "hourly",
        "breakTimeHours": 0.5,
        "components": {
            "houseRentAllowance": {"percentage": 40},
            "standardAllowance": {"computationType": "fixed", "fixedAmount": 3000},
            "fixedAllowance": {"amount": 99999},
            "unknownThing": {"amount": 1},
        },
        "providentFund": {"employeeContribution": {"percentage": 10}},
        "professionalTax": {"amount": 150},
    }

    p = svc.update_salary(current_role=Role.ADMIN, employee_id=1, changes=SalaryUpdate.from_payload(payload))

    assert p.wage_type == WageType.HOURLY
    assert p.break_time_hours == Decimal("0.5")
    assert p.component(K.HOUSE_RENT_ALLOWANCE).amount == Decimal("10000")
    assert p.component(K.STANDARD_ALLOWANCE).amount == Decimal("3000")
    # fixedAllowance edits are ignored: it is always the residual.
    assert p.component(K.FIXED_ALLOWANCE).amount == Decimal("50000") - Decimal("25000") - Decimal("10000") - Decimal(
        "3000"
    ) - Decimal("2082.5") * 2
    assert p.provident_fund.employee_contribution.amount == Decimal("2500")
    assert p.provident_fund.employer_contribution.amount == Decimal("3000")
    assert p.professional_tax == Decimal("150")


def test_edits_keep_previous_values():
    svc, _ = _service()
    svc.update_salary(current_role=Role.ADMIN, employee_id=1, changes=SalaryUpdate.from_payload({"monthlyWage": 50000}))

    p = svc.update_salary(
        current_role=Role.ADMIN,
        employee_id=1,
        changes=SalaryUpdate.from_payload({"components": {"basicSalary": {"percentage": 60}}}),
    )

    assert p.monthly_wage == Decimal("50000")
    assert p.component(K.BASIC_SALARY).amount == Decimal("30000")


def test_overcommitted_update_is_flagged(caplog):
    svc, _ = _service()

    with caplog.at_level("WARNING"):
        p = svc.update_salary(
            current_role=Role.ADMIN,
            employee_id=1,
            changes=SalaryUpdate.from_payload({"monthlyWage": 1000, "components": {"basicSalary": {"percentage": 200}}}),
        )

    assert p.overcommitted is True
    assert p.component(K.FIXED_ALLOWANCE).amount == 0
    assert "exceed monthly wage" in caplog.text


def test_employee_cannot_edit_salary():
    svc, repo = _service()

    with pytest.raises(AuthorizationError):
        svc.update_salary(current_role=Role.EMPLOYEE, employee_id=1, changes=SalaryUpdate())
    assert repo.saved == []


@pytest.mark.parametrize(
    "payload",
    [
        {"components": {"basicSalary": {"computationType": "percent"}}},
        {"monthlyWage": -1},
        {"monthlyWage": "abc"},
        {"monthlyWage": True},
        {"wageType": "daily"},
        {"workingDaysPerWeek": 8},
        {"workingDaysPerWeek": 4.5},
        {"providentFund": {"employerContribution": {"percentage": -12}}},
        {"components": ["basicSalary"]},
        {"components": {"basicSalary": 5000}},
        {"providentFund": 12},
        {"providentFund": {"employeeContribution": 5}},
    ],
)
def test_invalid_payloads_are_rejected(payload):
    with pytest.raises(ValidationError):
        SalaryUpdate.from_payload(payload)


def test_percentages_are_kept_to_two_decimals():
    update = SalaryUpdate.from_payload({"components": {"performanceBonus": {"percentage": "8.335"}}})

    assert update.components[K.PERFORMANCE_BONUS].percentage == Decimal("8.34")
    assert update.components[K.PERFORMANCE_BONUS].computation_type is None


def test_breakdown_rounds_only_for_display():
    svc, _ = _service()
    p = svc.update_salary(
        current_role=Role.ADMIN,
        employee_id=1,
        changes=SalaryUpdate.from_payload(
            {"monthlyWage": "33333.33", "components": {"basicSalary": {"computationType": ComputationType.PERCENTAGE.value}}}
        ),
    )

    view = SalaryProfileService.breakdown(p)

    assert p.component(K.BASIC_SALARY).amount == Decimal("16666.665")
    assert view["components"]["basicSalary"]["amount"] == 16666.67
    assert view["components"]["standardAllowance"]["fixedAmount"] == 4167.0
    assert view["monthlyWage"] == 33333.33
    assert view["providentFund"]["employeeContribution"]["percentage"] == 12.0
    assert view["overcommitted"] is False
