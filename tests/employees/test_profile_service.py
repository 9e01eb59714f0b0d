from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.dayflow_hrms.dayflow_hrms.core.enums import LeaveStatus, LeaveType, Role
from src.dayflow_hrms.dayflow_hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.dayflow_hrms.dayflow_hrms.employees.permissions import EDITABLE_PROFILE_FIELDS, editable_fields
from src.dayflow_hrms.dayflow_hrms.employees.service import ProfileService
from src.dayflow_hrms.dayflow_hrms.salary.service import SalaryProfileService

from tests.fakes import FakeAttendanceRepo, FakeEmployeeRepo, FakeLeaveRepo, FakeSalaryRepo, make_employee

DAY = date(2026, 3, 2)


def _service():
    employees = FakeEmployeeRepo(
        [
            make_employee(1, first_name="Ana"),
            make_employee(2, first_name="Ben"),
            make_employee(3, first_name="Cy", company_id=2),
            make_employee(10, first_name="Admin", role=Role.ADMIN),
        ]
    )
    attendance = FakeAttendanceRepo()
    leaves = FakeLeaveRepo()
    svc = ProfileService(employees, SalaryProfileService(FakeSalaryRepo()), attendance, leaves)
    return svc, employees, attendance, leaves


def test_capability_table_covers_every_role():
    assert set(EDITABLE_PROFILE_FIELDS) == set(Role)
    assert "bank_account_number" not in editable_fields(Role.EMPLOYEE)
    assert "bank_account_number" in editable_fields(Role.ADMIN)
    assert editable_fields(Role.EMPLOYEE) < editable_fields(Role.SUPER_ADMIN)


def test_employee_updates_only_self_service_fields():
    svc, employees, _, _ = _service()

    updated = svc.update_profile(
        current_user_id=1,
        current_role=Role.EMPLOYEE,
        current_company_id=1,
        employee_id=1,
        changes={"phone": " 555-0100 ", "about": "Hi", "bankAccountNumber": "123", "loginId": "HACK", "role": "admin"},
    )

    assert updated.phone == "555-0100"
    assert updated.about == "Hi"
    assert updated.bank_account_number is None
    assert updated.login_id == "OI0001"
    assert updated.role == Role.EMPLOYEE


def test_employee_cannot_edit_someone_else():
    svc, _, _, _ = _service()

    with pytest.raises(AuthorizationError):
        svc.update_profile(
            current_user_id=1, current_role=Role.EMPLOYEE, current_company_id=1, employee_id=2, changes={"phone": "1"}
        )


def test_admin_updates_private_fields_with_normalisation():
    svc, _, _, _ = _service()

    updated = svc.update_profile(
        current_user_id=10,
        current_role=Role.ADMIN,
        current_company_id=1,
        employee_id=2,
        changes={"panNumber": "abcde1234f", "personalEmail": "Ben@Mail.COM", "dateOfBirth": "1990-05-17", "gender": "male"},
    )

    assert updated.pan_number == "ABCDE1234F"
    assert updated.personal_email == "ben@mail.com"
    assert updated.date_of_birth == date(1990, 5, 17)
    assert updated.gender == "male"


def test_invalid_values_are_rejected():
    svc, _, _, _ = _service()

    with pytest.raises(ValidationError):
        svc.update_profile(
            current_user_id=10, current_role=Role.ADMIN, current_company_id=1, employee_id=2, changes={"gender": "x"}
        )
    with pytest.raises(ValidationError):
        svc.update_profile(
            current_user_id=1, current_role=Role.EMPLOYEE, current_company_id=1, employee_id=1, changes={"firstName": " "}
        )


def test_admin_cannot_reach_other_company():
    svc, _, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.update_profile(
            current_user_id=10, current_role=Role.ADMIN, current_company_id=1, employee_id=3, changes={"phone": "1"}
        )
    with pytest.raises(NotFoundError):
        svc.get_profile(current_user_id=10, current_role=Role.ADMIN, current_company_id=1, employee_id=3)


def test_profile_includes_salary_for_self_and_admin_only():
    svc, _, _, _ = _service()

    own = svc.get_profile(current_user_id=1, current_role=Role.EMPLOYEE, current_company_id=1, employee_id=1)
    other = svc.get_profile(current_user_id=1, current_role=Role.EMPLOYEE, current_company_id=1, employee_id=2)
    admin = svc.get_profile(current_user_id=10, current_role=Role.ADMIN, current_company_id=1, employee_id=2)

    assert own["profile"]["firstName"] == "Ana"
    assert own["salary"]["monthlyWage"] == 0.0
    assert other["salary"] is None
    assert admin["salary"]["components"]["standardAllowance"]["amount"] == 4167.0


def test_directory_work_status():
    svc, _, attendance, leaves = _service()
    attendance.create_checkin(employee_id=1, work_date=DAY, check_in_time=datetime(2026, 3, 2, 9, 0))
    rid = leaves.create_leave(
        employee_id=2,
        leave_type=LeaveType.SICK_LEAVE,
        start_date=DAY,
        end_date=DAY,
        allocation=1,
        reason=None,
        remarks=None,
        attachment=None,
    )
    leaves.requests[rid] = replace(leaves.requests[rid], status=LeaveStatus.APPROVED)

    rows = svc.list_directory(company_id=1, today=DAY)

    assert [(r["firstName"], r["workStatus"]) for r in rows] == [("Ana", "present"), ("Ben", "on_leave")]


def _onboard(svc, **overrides):
    kwargs = dict(
        current_user_id=10,
        current_role=Role.ADMIN,
        current_company_id=1,
        payload={"firstName": "Dee", "lastName": "Ray", "email": " Dee@Example.COM ", "department": "Ops"},
        login_id="oideer20260001",
        password_hash="hash$abc",
        today=DAY,
    )
    kwargs.update(overrides)
    return svc.create_employee(**kwargs)


def test_admin_adds_employee_with_salary_and_leave_defaults():
    svc, employees, _, leaves = _service()

    created = _onboard(svc)

    assert created.employee_id == 11
    assert created.company_id == 1
    assert created.role == Role.EMPLOYEE
    assert created.is_active is True
    assert created.email == "dee@example.com"
    assert created.login_id == "OIDEER20260001"
    assert created.year_of_joining == 2026
    assert created.created_by == 10
    assert employees.password_hashes[11] == "hash$abc"

    profile = svc.get_profile(current_user_id=10, current_role=Role.ADMIN, current_company_id=1, employee_id=11)
    assert profile["salary"]["monthlyWage"] == 0.0
    assert leaves.ledger[(11, LeaveType.PAID_TIME_OFF)] == [2026, 24, 0]
    assert leaves.ledger[(11, LeaveType.SICK_LEAVE)] == [2026, 7, 0]


def test_onboarding_keeps_given_year_of_joining():
    svc, _, _, _ = _service()

    created = _onboard(svc, payload={"firstName": "Dee", "lastName": "Ray", "email": "d@x.com", "yearOfJoining": "2019"})

    assert created.year_of_joining == 2019


def test_employee_cannot_add_employees():
    svc, employees, _, _ = _service()

    with pytest.raises(AuthorizationError):
        _onboard(svc, current_user_id=1, current_role=Role.EMPLOYEE)
    assert 11 not in employees.employees


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"payload": {"firstName": "Dee", "lastName": "Ray", "email": "EMP1@example.com"}}, "Email already registered"),
        ({"payload": {"firstName": "Dee", "lastName": "Ray"}}, "email is required"),
        ({"payload": {"lastName": "Ray", "email": "d@x.com"}}, "first_name is required"),
        ({"login_id": "oi0001"}, "Login ID already in use"),
        ({"login_id": None}, "loginId is required"),
    ],
)
def test_onboarding_rejects_bad_input(overrides, message):
    svc, employees, _, _ = _service()

    with pytest.raises(ValidationError, match=message):
        _onboard(svc, **overrides)
    assert 11 not in employees.employees
