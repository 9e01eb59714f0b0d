"""In-memory repositories used by service and controller tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from src.dayflow_hrms.dayflow_hrms.attendance.model import AttendanceRecord
from src.dayflow_hrms.dayflow_hrms.core.enums import AttendanceStatus, LeaveStatus, Role
from src.dayflow_hrms.dayflow_hrms.employees.model import Employee
from src.dayflow_hrms.dayflow_hrms.leaves.model import LeaveAllocation, LeaveBalance, LeaveRequest


def make_employee(employee_id, *, company_id=1, role=Role.EMPLOYEE, first_name="Emp", last_name=None, **kwargs):
    return Employee(
        employee_id=employee_id,
        company_id=company_id,
        role=role,
        first_name=first_name,
        last_name=last_name or str(employee_id),
        year_of_joining=2024,
        login_id=f"OI{employee_id:04d}",
        email=f"emp{employee_id}@example.com",
        **kwargs,
    )


class FakeSalaryRepo:
    def __init__(self):
        self.profiles = {}
        self.saved = []

    def get_by_employee(self, employee_id):
        return self.profiles.get(int(employee_id))

    def create_if_missing(self, profile):
        self.profiles.setdefault(profile.employee_id, profile)

    def save(self, profile):
        self.saved.append(profile)
        self.profiles[profile.employee_id] = profile


class FakeEmployeeRepo:
    def __init__(self, employees=()):
        self.employees = {e.employee_id: e for e in employees}
        self.password_hashes = {}

    def get_by_id(self, employee_id):
        return self.employees.get(int(employee_id))

    def list_active(self, *, company_id, search=""):
        out = [
            e
            for e in self.employees.values()
            if e.company_id == company_id and e.role == Role.EMPLOYEE and e.is_active
        ]
        if search:
            s = search.lower()
            out = [e for e in out if s in e.full_name.lower() or s in (e.email or "").lower()]
        return sorted(out, key=lambda e: (e.first_name, e.last_name))

    def update_fields(self, employee_id, fields):
        e = self.employees.get(int(employee_id))
        if not e:
            return False
        self.employees[e.employee_id] = replace(e, **fields)
        return True

    def get_by_email(self, email):
        return next((e for e in self.employees.values() if e.email == email), None)

    def get_by_login_id(self, login_id):
        return next((e for e in self.employees.values() if e.login_id == login_id), None)

    def create(self, *, company_id, role, login_id, password_hash, created_by, fields):
        employee_id = max(self.employees, default=0) + 1
        self.employees[employee_id] = Employee(
            employee_id=employee_id,
            company_id=company_id,
            role=role,
            login_id=login_id,
            created_by=created_by,
            **fields,
        )
        self.password_hashes[employee_id] = password_hash
        return employee_id


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records = {}

    def add(self, record):
        self.records[(record.employee_id, record.work_date)] = record

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.records.get((int(employee_id), work_date))

    def list_for_employee(self, employee_id, *, start_date, end_date):
        return [
            r for (eid, d), r in self.records.items() if eid == int(employee_id) and start_date <= d <= end_date
        ]

    def list_for_date(self, work_date, *, employee_ids):
        return [r for (eid, d), r in self.records.items() if d == work_date and eid in set(employee_ids)]

    def create_checkin(self, *, employee_id, work_date, check_in_time):
        existing = self.records.get((int(employee_id), work_date))
        if existing and existing.check_in_time:
            return False
        aid = existing.attendance_id if existing else self._next_id
        self._next_id += 1
        self.records[(int(employee_id), work_date)] = AttendanceRecord(
            attendance_id=aid,
            employee_id=int(employee_id),
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=AttendanceStatus.PRESENT,
        )
        return True

    def update_checkout(self, *, attendance_id, check_out_time, work_hours, extra_hours):
        for key, r in self.records.items():
            if r.attendance_id == attendance_id:
                if r.check_out_time is not None:
                    return False
                self.records[key] = replace(
                    r, check_out_time=check_out_time, work_hours=work_hours, extra_hours=extra_hours
                )
                return True
        return False


class FakeLeaveRepo:
    def __init__(self):
        self._next_id = 1
        self.requests = {}
        self.ledger = {}  # (employee_id, leave_type) -> [year, total, used]

    def create_leave(self, *, employee_id, leave_type, start_date, end_date, allocation, reason, remarks, attachment):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            request_id=rid,
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            allocation=allocation,
            status=LeaveStatus.PENDING,
            created_at=datetime(2026, 3, 1, 9, 0),
            reason=reason,
            remarks=remarks,
            attachment=attachment,
        )
        return rid

    def get_leave(self, *, request_id):
        return self.requests.get(int(request_id))

    def _row(self, r):
        return {"id": r.request_id, "leaveType": r.leave_type.value, "status": r.status.value, "allocation": r.allocation}

    def list_for_employee(self, *, employee_id, limit=200):
        rows = [self._row(r) for r in self.requests.values() if r.employee_id == int(employee_id)]
        return list(reversed(rows))[:limit]

    def list_for_company(self, *, company_id, status=None, search="", limit=200):
        rows = [self._row(r) for r in self.requests.values() if status is None or r.status == status]
        return list(reversed(rows))[:limit]

    def _decide(self, request_id, status, reviewed_by, admin_comment):
        r = self.requests.get(int(request_id))
        if not r or r.status != LeaveStatus.PENDING:
            return None
        self.requests[r.request_id] = replace(
            r,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=datetime(2026, 3, 2, 9, 0),
            admin_comment=admin_comment,
        )
        return r

    def approve(self, *, request_id, reviewed_by, admin_comment, charge_ledger):
        r = self._decide(request_id, LeaveStatus.APPROVED, reviewed_by, admin_comment)
        if r is None:
            return False
        if charge_ledger:
            self.ledger[(r.employee_id, r.leave_type)][2] += r.allocation
        return True

    def reject(self, *, request_id, reviewed_by, admin_comment):
        return self._decide(request_id, LeaveStatus.REJECTED, reviewed_by, admin_comment) is not None

    def find_approved_on(self, *, employee_id, day):
        for r in self.requests.values():
            if r.employee_id == int(employee_id) and r.status == LeaveStatus.APPROVED and r.covers(day):
                return r
        return None

    def list_approved_overlapping(self, *, employee_ids, start_date, end_date):
        return [
            r
            for r in self.requests.values()
            if r.employee_id in set(employee_ids)
            and r.status == LeaveStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]

    def get_allocation(self, *, employee_id):
        rows = {lt: v for (eid, lt), v in self.ledger.items() if eid == int(employee_id)}
        if not rows:
            return None
        return LeaveAllocation(
            employee_id=int(employee_id),
            year=max(v[0] for v in rows.values()),
            balances={lt: LeaveBalance(total=v[1], used=v[2]) for lt, v in rows.items()},
        )

    def create_allocation_if_missing(self, *, employee_id, year, totals):
        for leave_type, total in totals.items():
            self.ledger.setdefault((int(employee_id), leave_type), [year, total, 0])
