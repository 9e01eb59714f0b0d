from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, like_pattern
from .model import LeaveAllocation, LeaveBalance, LeaveRequest
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    r.request_id, r.employee_id, r.leave_type, r.start_date, r.end_date, r.allocation,
    r.status, r.reason, r.remarks, r.attachment, r.admin_comment,
    r.reviewed_by, r.reviewed_at, r.created_at
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        allocation=int(r["allocation"]),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        reason=r.get("reason"),
        remarks=r.get("remarks"),
        attachment=r.get("attachment"),
        admin_comment=r.get("admin_comment"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
    )


def _to_row(r: dict) -> dict:
    reviewer = None
    if r.get("reviewer_first_name") is not None:
        reviewer = {"name": f"{r['reviewer_first_name']} {r['reviewer_last_name']}"}
    return {
        "id": int(r["request_id"]),
        "leaveType": r["leave_type"],
        "startDate": r["start_date"].strftime("%Y-%m-%d"),
        "endDate": r["end_date"].strftime("%Y-%m-%d"),
        "allocation": int(r["allocation"]),
        "status": r["status"],
        "reason": r.get("reason"),
        "remarks": r.get("remarks"),
        "attachment": r.get("attachment"),
        "adminComment": r.get("admin_comment"),
        "reviewedBy": reviewer,
        "reviewedAt": r["reviewed_at"].isoformat() if r.get("reviewed_at") else None,
        "createdAt": r["created_at"].isoformat() if r.get("created_at") else None,
    }


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Requests --------
    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        allocation: int,
        reason: Optional[str],
        remarks: Optional[str],
        attachment: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date, allocation,
                    status, reason, remarks, attachment
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(allocation),
                    LeaveStatus.PENDING.value,
                    reason,
                    remarks,
                    attachment,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM leave_requests r WHERE r.request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_employee(self, *, employee_id: int, limit: int = 200) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS},
                       rv.first_name AS reviewer_first_name, rv.last_name AS reviewer_last_name
                FROM leave_requests r
                LEFT JOIN employees rv ON rv.employee_id = r.reviewed_by
                WHERE r.employee_id=%s
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_for_company(
        self,
        *,
        company_id: int,
        status: Optional[LeaveStatus] = None,
        search: str = "",
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["e.company_id=%s"]
        params: list[object] = [int(company_id)]

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if search:
            pattern = like_pattern(search)
            clauses.append("(e.first_name LIKE %s OR e.last_name LIKE %s OR e.email LIKE %s OR e.login_id LIKE %s)")
            params.extend([pattern] * 4)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS},
                       e.first_name, e.last_name, e.email, e.login_id, e.avatar,
                       e.department, e.designation,
                       rv.first_name AS reviewer_first_name, rv.last_name AS reviewer_last_name
                FROM leave_requests r
                JOIN employees e ON e.employee_id = r.employee_id
                LEFT JOIN employees rv ON rv.employee_id = r.reviewed_by
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _to_row(r)
                row["employee"] = {
                    "id": int(r["employee_id"]),
                    "name": f"{r['first_name']} {r['last_name']}",
                    "email": r.get("email"),
                    "loginId": r.get("login_id"),
                    "avatar": r.get("avatar"),
                    "department": r.get("department"),
                    "designation": r.get("designation"),
                }
                out.append(row)
            return out

    def approve(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        admin_comment: Optional[str],
        charge_ledger: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(),
                    admin_comment=COALESCE(%s, admin_comment)
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.APPROVED.value,
                    int(reviewed_by),
                    admin_comment,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False

            if charge_ledger:
                # Increment in place; never read-then-write the counter.
                cur.execute(
                    """
                    UPDATE leave_allocations a
                    JOIN leave_requests r
                      ON r.employee_id = a.employee_id AND r.leave_type = a.leave_type
                    SET a.used = a.used + r.allocation
                    WHERE r.request_id=%s
                    """,
                    (int(request_id),),
                )
            return True

    def reject(self, *, request_id: int, reviewed_by: int, admin_comment: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(),
                    admin_comment=COALESCE(%s, admin_comment)
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.REJECTED.value,
                    int(reviewed_by),
                    admin_comment,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def find_approved_on(self, *, employee_id: int, day: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests r
                WHERE r.employee_id=%s AND r.status=%s AND r.start_date <= %s AND r.end_date >= %s
                ORDER BY r.start_date
                LIMIT 1
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, day, day),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_approved_overlapping(
        self,
        *,
        employee_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[LeaveRequest]:
        if not employee_ids:
            return []

        ids_sql, ids = in_clause("r.employee_id", employee_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests r
                WHERE {ids_sql}
                  AND r.status=%s AND r.start_date <= %s AND r.end_date >= %s
                ORDER BY r.start_date
                """,
                (*ids, LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return [_to_request(r) for r in fetchall(cur)]

    # -------- Allocation ledger --------
    def get_allocation(self, *, employee_id: int) -> Optional[LeaveAllocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type, year, total, used
                FROM leave_allocations
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            rows = fetchall(cur)
            if not rows:
                return None
            return LeaveAllocation(
                employee_id=int(employee_id),
                year=max(int(r["year"]) for r in rows),
                balances={
                    LeaveType(r["leave_type"]): LeaveBalance(total=int(r["total"]), used=int(r["used"]))
                    for r in rows
                },
            )

    def create_allocation_if_missing(self, *, employee_id: int, year: int, totals: Mapping[LeaveType, int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO leave_allocations(employee_id, leave_type, year, total, used)
                VALUES(%s,%s,%s,%s,0)
                """,
                [(int(employee_id), leave_type.value, int(year), int(total)) for leave_type, total in totals.items()],
            )
