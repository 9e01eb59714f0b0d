from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LEAVE_TOTALS, LEDGER_LEAVE_TYPES
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveAllocation, allocation_days
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

LEAVE_REVIEWER_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})


def allocation_to_dict(allocation: LeaveAllocation) -> dict:
    out = {"year": allocation.year}
    for leave_type in LeaveType:
        b = allocation.balance(leave_type)
        out[leave_type.value] = {"total": b.total, "used": b.used, "available": b.available}
    return out


class LeaveService:
    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def get_allocation(self, employee_id: int, *, today: Optional[date] = None) -> LeaveAllocation:
        allocation = self._leaves.get_allocation(employee_id=int(employee_id))
        if allocation:
            return allocation

        year = (today or date.today()).year
        self._leaves.create_allocation_if_missing(employee_id=int(employee_id), year=year, totals=DEFAULT_LEAVE_TOTALS)
        allocation = self._leaves.get_allocation(employee_id=int(employee_id))
        if not allocation:
            raise ValidationError("Could not create leave allocation")
        return allocation

    def apply(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str = "",
        remarks: str = "",
        attachment: str = "",
    ) -> int:
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        days = allocation_days(start_date, end_date)

        if leave_type in LEDGER_LEAVE_TYPES:
            balance = self.get_allocation(employee_id).balance(leave_type)
            if balance.available < days:
                raise ValidationError(
                    f"Insufficient {leave_type.value} balance: {balance.available} day(s) available, {days} requested"
                )

        request_id = self._leaves.create_leave(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            allocation=days,
            reason=optional_text(reason, "reason"),
            remarks=optional_text(remarks, "remarks"),
            attachment=optional_text(attachment, "attachment") if leave_type == LeaveType.SICK_LEAVE else None,
        )
        logger.info("Leave request %s created for employee %s (%s, %s days)", request_id, employee_id, leave_type.value, days)
        return request_id

    def list_for_employee(self, employee_id: int) -> dict:
        return {
            "leaves": list(self._leaves.list_for_employee(employee_id=int(employee_id), limit=DEFAULT_HISTORY_LIMIT)),
            "allocation": allocation_to_dict(self.get_allocation(employee_id)),
        }

    def list_for_admin(
        self,
        *,
        current_role: Role,
        company_id: int,
        status: Optional[LeaveStatus] = None,
        search: str = "",
    ) -> list[dict]:
        if current_role not in LEAVE_REVIEWER_ROLES:
            raise AuthorizationError("Only administrators can view all leave requests")

        return list(
            self._leaves.list_for_company(
                company_id=int(company_id),
                status=status,
                search=(search or "").strip(),
                limit=DEFAULT_HISTORY_LIMIT,
            )
        )

    def _pending_in_company(self, *, current_role: Role, company_id: Optional[int], request_id: int):
        if current_role not in LEAVE_REVIEWER_ROLES:
            raise AuthorizationError("Only administrators can review leave requests")

        req = self._leaves.get_leave(request_id=int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")

        if company_id is not None:
            owner = self._employees.get_by_id(req.employee_id)
            if not owner or owner.company_id != int(company_id):
                raise NotFoundError("Leave request not found")

        if req.status != LeaveStatus.PENDING:
            raise ValidationError(f"Leave request already {req.status.value}")
        return req

    def approve(
        self,
        *,
        current_role: Role,
        admin_id: int,
        company_id: Optional[int],
        request_id: int,
        admin_comment: str = "",
    ) -> None:
        req = self._pending_in_company(current_role=current_role, company_id=company_id, request_id=request_id)

        charge = req.leave_type in LEDGER_LEAVE_TYPES
        if charge:
            # The ledger row must exist before the increment runs.
            self.get_allocation(req.employee_id)

        decided = self._leaves.approve(
            request_id=req.request_id,
            reviewed_by=int(admin_id),
            admin_comment=optional_text(admin_comment, "adminComment"),
            charge_ledger=charge,
        )
        if not decided:
            raise ValidationError("Leave request already decided")

        logger.info("Leave request %s approved by %s", req.request_id, admin_id)

    def reject(
        self,
        *,
        current_role: Role,
        admin_id: int,
        company_id: Optional[int],
        request_id: int,
        admin_comment: str = "",
    ) -> None:
        req = self._pending_in_company(current_role=current_role, company_id=company_id, request_id=request_id)

        decided = self._leaves.reject(
            request_id=req.request_id,
            reviewed_by=int(admin_id),
            admin_comment=optional_text(admin_comment, "adminComment"),
        )
        if not decided:
            raise ValidationError("Leave request already decided")

        logger.info("Leave request %s rejected by %s", req.request_id, admin_id)
