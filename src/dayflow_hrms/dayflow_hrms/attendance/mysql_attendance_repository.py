from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_decimal_or_zero
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, work_date, check_in_time, check_out_time,
           status, work_hours, extra_hours
    FROM attendance_records
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        work_hours=to_decimal_or_zero(r.get("work_hours")),
        extra_hours=to_decimal_or_zero(r.get("extra_hours")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_id=%s AND work_date=%s", (int(employee_id), work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND work_date BETWEEN %s AND %s ORDER BY work_date",
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date, *, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        if not employee_ids:
            return []

        ids_sql, ids = in_clause("employee_id", employee_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE work_date=%s AND {ids_sql}", (work_date, *ids))
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(self, *, employee_id: int, work_date: date, check_in_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(employee_id, work_date, check_in_time, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in_time, AttendanceStatus.PRESENT.value),
            )
            if cur.rowcount > 0:
                return True

            # A row may exist without a check-in (e.g. marked absent).
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s
                WHERE employee_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (check_in_time, AttendanceStatus.PRESENT.value, int(employee_id), work_date),
            )
            return cur.rowcount > 0

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        work_hours: Decimal,
        extra_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, work_hours=%s, extra_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, work_hours, extra_hours, int(attendance_id)),
            )
            return cur.rowcount > 0
