from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_identity, json_body, login_required, ok, roles_required
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import ValidationError
from ..container import Container
from .service import allocation_to_dict


def _leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError(f"Unknown leave type: {value!r}")


def _status_filter(value: str):
    value = (value or "").strip()
    if not value or value == "all":
        return None
    try:
        return LeaveStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown leave status: {value!r}")


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave/apply", methods=["POST"], endpoint="leave_apply")
    @login_required
    def apply():
        data = json_body()
        request_id = service.apply(
            employee_id=current_identity().user_id,
            leave_type=_leave_type(data.get("leaveType")),
            start_date=parse_iso_date(data.get("startDate")),
            end_date=parse_iso_date(data.get("endDate")),
            reason=data.get("reason") or "",
            remarks=data.get("remarks") or "",
            attachment=data.get("attachment") or "",
        )
        return ok({"id": request_id}, "Leave request submitted successfully", 201)

    @app.route("/api/leave/employee", methods=["GET"], endpoint="leave_employee")
    @login_required
    def employee_leaves():
        return ok(service.list_for_employee(current_identity().user_id))

    @app.route("/api/leave/admin", methods=["GET"], endpoint="leave_admin")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def admin_leaves():
        me = current_identity()
        return ok(
            service.list_for_admin(
                current_role=me.role,
                company_id=me.company_id,
                status=_status_filter(request.args.get("status", "")),
                search=request.args.get("search", ""),
            )
        )

    @app.route("/api/leave/<int:request_id>/approve", methods=["PUT"], endpoint="leave_approve")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def approve(request_id: int):
        me = current_identity()
        service.approve(
            current_role=me.role,
            admin_id=me.user_id,
            company_id=me.company_id,
            request_id=request_id,
            admin_comment=json_body().get("adminComment") or "",
        )
        return ok(None, "Leave request approved successfully")

    @app.route("/api/leave/<int:request_id>/reject", methods=["PUT"], endpoint="leave_reject")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def reject(request_id: int):
        me = current_identity()
        service.reject(
            current_role=me.role,
            admin_id=me.user_id,
            company_id=me.company_id,
            request_id=request_id,
            admin_comment=json_body().get("adminComment") or "",
        )
        return ok(None, "Leave request rejected")

    @app.route("/api/leave/allocation/<int:employee_id>", methods=["GET"], endpoint="leave_allocation")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def allocation(employee_id: int):
        me = current_identity()
        container.profile_service.get_in_company(employee_id, me.company_id)
        return ok(allocation_to_dict(service.get_allocation(employee_id)))
