"""Profile field capabilities per role.

The table is the single place deciding which profile fields a role may write;
the update handler only consults it.
"""

from __future__ import annotations

from typing import FrozenSet

from ..core.enums import Role

# API field name -> Employee attribute
PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "avatar": "avatar",
    "designation": "designation",
    "department": "department",
    "manager": "manager",
    "location": "location",
    "dateOfBirth": "date_of_birth",
    "residingAddress": "residing_address",
    "nationality": "nationality",
    "personalEmail": "personal_email",
    "gender": "gender",
    "maritalStatus": "marital_status",
    "dateOfJoining": "date_of_joining",
    "yearOfJoining": "year_of_joining",
    "bankAccountNumber": "bank_account_number",
    "bankName": "bank_name",
    "ifscCode": "ifsc_code",
    "panNumber": "pan_number",
    "uanNumber": "uan_number",
    "employeeCode": "employee_code",
    "about": "about",
    "jobDescription": "job_description",
    "interests": "interests",
    "loginId": "login_id",
}

_SELF_SERVICE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "department",
        "location",
        "manager",
        "avatar",
        "about",
        "interests",
    }
)

_ALL_FIELDS = frozenset(PROFILE_FIELDS.values())

EDITABLE_PROFILE_FIELDS = {
    Role.EMPLOYEE: _SELF_SERVICE_FIELDS,
    Role.ADMIN: _ALL_FIELDS,
    Role.SUPER_ADMIN: _ALL_FIELDS,
}


def editable_fields(role: Role) -> FrozenSet[str]:
    return EDITABLE_PROFILE_FIELDS.get(role, frozenset())


def can_edit_other_profiles(role: Role) -> bool:
    return role in {Role.ADMIN, Role.SUPER_ADMIN}
