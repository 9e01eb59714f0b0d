from __future__ import annotations

from flask import Flask

from ..common.web import current_identity, json_body, login_required, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container
from .service import SalaryUpdate


def register(app: Flask, container: Container) -> None:
    service = container.salary_service

    @app.route("/api/profile/<int:employee_id>/salary", methods=["GET"], endpoint="salary_get")
    @login_required
    def salary_get(employee_id: int):
        me = current_identity()
        if me.role == Role.EMPLOYEE and me.user_id != employee_id:
            raise AuthorizationError("You can only view your own salary")
        container.profile_service.get_in_company(employee_id, me.company_id)
        return ok(service.breakdown(service.get_or_create(employee_id)))

    @app.route("/api/profile/<int:employee_id>/salary", methods=["PUT"], endpoint="salary_update")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def salary_update(employee_id: int):
        me = current_identity()
        container.profile_service.get_in_company(employee_id, me.company_id)
        profile = service.update_salary(
            current_role=me.role,
            employee_id=employee_id,
            changes=SalaryUpdate.from_payload(json_body()),
        )
        return ok(service.breakdown(profile), "Salary information updated successfully")
