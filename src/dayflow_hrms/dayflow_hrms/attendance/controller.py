from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_month
from ..common.web import current_identity, login_required, ok, roles_required
from ..core.enums import Role
from ..container import Container
from .service import record_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        record = service.check_in(current_identity().user_id)
        return ok(record_to_dict(record), "Checked in successfully", 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        record = service.check_out(current_identity().user_id)
        return ok(record_to_dict(record), "Checked out successfully")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok(service.get_today(current_identity().user_id))

    @app.route("/api/attendance/employee/<month>", methods=["GET"], endpoint="attendance_month")
    @login_required
    def month(month: str):
        year, mon = parse_month(month)
        return ok(service.get_month(current_identity().user_id, year=year, month=mon))

    @app.route("/api/attendance/admin/<day>", methods=["GET"], endpoint="attendance_admin_day")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def admin_day(day: str):
        me = current_identity()
        work_date = date.today() if day == "today" else parse_iso_date(day)
        return ok(
            service.get_admin_day(
                company_id=me.company_id,
                work_date=work_date,
                search=request.args.get("search", ""),
            )
        )
