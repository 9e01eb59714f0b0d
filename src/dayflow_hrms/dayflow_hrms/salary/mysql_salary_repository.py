from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import ComputationType, SalaryComponentKey, WageType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Contribution, ProvidentFund, SalaryComponent, SalaryProfile
from .repository import SalaryRepository


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_employee(self, employee_id: int) -> Optional[SalaryProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, wage_type, monthly_wage, yearly_wage,
                       working_days_per_week, break_time_hours,
                       pf_employee_amount, pf_employee_percentage,
                       pf_employer_amount, pf_employer_percentage,
                       professional_tax, overcommitted, created_at, updated_at
                FROM salary_profiles
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT component_key, amount, percentage, computation_type, fixed_amount
                FROM salary_components
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            components = {
                SalaryComponentKey(c["component_key"]): SalaryComponent(
                    amount=Decimal(c["amount"]),
                    percentage=Decimal(c["percentage"]),
                    computation_type=ComputationType(c["computation_type"]),
                    fixed_amount=Decimal(c["fixed_amount"]) if c.get("fixed_amount") is not None else None,
                )
                for c in fetchall(cur)
            }

            return SalaryProfile(
                employee_id=int(r["employee_id"]),
                wage_type=WageType(r["wage_type"]),
                monthly_wage=Decimal(r["monthly_wage"]),
                yearly_wage=Decimal(r["yearly_wage"]),
                working_days_per_week=int(r["working_days_per_week"]),
                break_time_hours=Decimal(r["break_time_hours"]),
                components=components,
                provident_fund=ProvidentFund(
                    employee_contribution=Contribution(
                        amount=Decimal(r["pf_employee_amount"]),
                        percentage=Decimal(r["pf_employee_percentage"]),
                    ),
                    employer_contribution=Contribution(
                        amount=Decimal(r["pf_employer_amount"]),
                        percentage=Decimal(r["pf_employer_percentage"]),
                    ),
                ),
                professional_tax=Decimal(r["professional_tax"]),
                overcommitted=bool(r.get("overcommitted", 0)),
                created_at=r.get("created_at"),
                updated_at=r.get("updated_at"),
            )

    def create_if_missing(self, profile: SalaryProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO salary_profiles(
                    employee_id, wage_type, monthly_wage, yearly_wage,
                    working_days_per_week, break_time_hours,
                    pf_employee_amount, pf_employee_percentage,
                    pf_employer_amount, pf_employer_percentage,
                    professional_tax, overcommitted, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                self._profile_params(profile),
            )
            # Another request created it first; keep its components.
            if cur.rowcount == 0:
                return
            self._write_components(cur, profile)

    def save(self, profile: SalaryProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_profiles(
                    employee_id, wage_type, monthly_wage, yearly_wage,
                    working_days_per_week, break_time_hours,
                    pf_employee_amount, pf_employee_percentage,
                    pf_employer_amount, pf_employer_percentage,
                    professional_tax, overcommitted, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    wage_type=VALUES(wage_type),
                    monthly_wage=VALUES(monthly_wage),
                    yearly_wage=VALUES(yearly_wage),
                    working_days_per_week=VALUES(working_days_per_week),
                    break_time_hours=VALUES(break_time_hours),
                    pf_employee_amount=VALUES(pf_employee_amount),
                    pf_employee_percentage=VALUES(pf_employee_percentage),
                    pf_employer_amount=VALUES(pf_employer_amount),
                    pf_employer_percentage=VALUES(pf_employer_percentage),
                    professional_tax=VALUES(professional_tax),
                    overcommitted=VALUES(overcommitted),
                    updated_at=VALUES(updated_at)
                """,
                self._profile_params(profile),
            )
            self._write_components(cur, profile)

    @staticmethod
    def _profile_params(profile: SalaryProfile) -> tuple:
        pf = profile.provident_fund
        return (
            int(profile.employee_id),
            profile.wage_type.value,
            profile.monthly_wage,
            profile.yearly_wage,
            int(profile.working_days_per_week),
            profile.break_time_hours,
            pf.employee_contribution.amount,
            pf.employee_contribution.percentage,
            pf.employer_contribution.amount,
            pf.employer_contribution.percentage,
            profile.professional_tax,
            1 if profile.overcommitted else 0,
            profile.updated_at,
        )

    @staticmethod
    def _write_components(cur, profile: SalaryProfile) -> None:
        cur.executemany(
            """
            INSERT INTO salary_components(
                employee_id, component_key, amount, percentage, computation_type, fixed_amount
            )
            VALUES(%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                amount=VALUES(amount),
                percentage=VALUES(percentage),
                computation_type=VALUES(computation_type),
                fixed_amount=VALUES(fixed_amount)
            """,
            [
                (
                    int(profile.employee_id),
                    key.value,
                    comp.amount,
                    comp.percentage,
                    comp.computation_type.value,
                    comp.fixed_amount,
                )
                for key, comp in profile.components.items()
            ],
        )
