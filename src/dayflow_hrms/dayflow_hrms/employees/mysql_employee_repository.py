from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import Employee
from .permissions import PROFILE_FIELDS
from .repository import EmployeeRepository

_COLUMNS = (
    "employee_id",
    "company_id",
    "role",
    "first_name",
    "last_name",
    "year_of_joining",
    "login_id",
    "email",
    "phone",
    "avatar",
    "department",
    "designation",
    "manager",
    "location",
    "date_of_joining",
    "date_of_birth",
    "residing_address",
    "nationality",
    "personal_email",
    "gender",
    "marital_status",
    "bank_account_number",
    "bank_name",
    "ifsc_code",
    "pan_number",
    "uan_number",
    "employee_code",
    "about",
    "job_description",
    "interests",
    "is_active",
    "created_by",
)
_SELECT = ", ".join(_COLUMNS)

# Column names come from this whitelist only, never from request data.
_UPDATABLE = frozenset(PROFILE_FIELDS.values())


def _to_employee(row: dict) -> Employee:
    data = {col: row.get(col) for col in _COLUMNS}
    data["employee_id"] = int(row["employee_id"])
    data["company_id"] = int(row["company_id"]) if row.get("company_id") is not None else None
    data["role"] = Role(row["role"])
    data["year_of_joining"] = int(row["year_of_joining"])
    data["avatar"] = row.get("avatar") or ""
    data["gender"] = row.get("gender") or ""
    data["marital_status"] = row.get("marital_status") or ""
    data["is_active"] = bool(row.get("is_active", True))
    data["created_by"] = int(row["created_by"]) if row.get("created_by") is not None else None
    return Employee(**data)


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active(self, *, company_id: int, search: str = "") -> Sequence[Employee]:
        clauses = ["company_id=%s", "role=%s", "is_active=1"]
        params: list[object] = [int(company_id), Role.EMPLOYEE.value]

        if search:
            pattern = like_pattern(search)
            clauses.append("(first_name LIKE %s OR last_name LIKE %s OR email LIKE %s OR login_id LIKE %s)")
            params.extend([pattern] * 4)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT}
                FROM employees
                WHERE {" AND ".join(clauses)}
                ORDER BY first_name, last_name
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update_fields(self, employee_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in fields if c in _UPDATABLE]
        if not columns:
            return True

        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple([fields[c] for c in columns] + [int(employee_id)]),
            )
            # MySQL reports 0 affected rows when values are unchanged.
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee_id),))
            return fetchone(cur) is not None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_login_id(self, login_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM employees WHERE login_id=%s", (login_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

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
        columns = [c for c in fields if c in _UPDATABLE and c != "login_id"]
        names = ["company_id", "role", "login_id", "password_hash", "created_by", "is_active", *columns]
        values = [int(company_id), role.value, login_id, password_hash, int(created_by), 1]
        values.extend(fields[c] for c in columns)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({', '.join(names)}) VALUES({','.join(['%s'] * len(names))})",
                tuple(values),
            )
            return int(cur.lastrowid)
