from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveAllocation, LeaveRequest


class LeaveRepository(Protocol):
    # Requests
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
        raise NotImplementedError

    def get_leave(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, limit: int = 200) -> Sequence[dict]:
        """Return API rows, newest first, with the reviewer's name."""

        raise NotImplementedError

    def list_for_company(
        self,
        *,
        company_id: int,
        status: Optional[LeaveStatus] = None,
        search: str = "",
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return API rows joined with the requesting employee."""

        raise NotImplementedError

    def approve(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        admin_comment: Optional[str],
        charge_ledger: bool,
    ) -> bool:
        """Move a pending request to approved.

        When `charge_ledger` is set, the request's days are added to the
        employee's `used` counter in the same transaction. Returns False when
        the request was not pending anymore.
        """

        raise NotImplementedError

    def reject(self, *, request_id: int, reviewed_by: int, admin_comment: Optional[str]) -> bool:
        raise NotImplementedError

    def find_approved_on(self, *, employee_id: int, day: date) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        employee_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    # Allocation ledger
    def get_allocation(self, *, employee_id: int) -> Optional[LeaveAllocation]:
        raise NotImplementedError

    def create_allocation_if_missing(self, *, employee_id: int, year: int, totals: Mapping[LeaveType, int]) -> None:
        raise NotImplementedError
