from __future__ import annotations

from flask import Flask

from ..common.validators import optional_text
from ..common.web import current_identity, json_body, login_required, ok, roles_required
from ..core.enums import Role
from ..container import Container
from .service import employee_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.profile_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_directory")
    @login_required
    def directory():
        return ok(service.list_directory(company_id=current_identity().company_id))

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def create_employee():
        me = current_identity()
        data = json_body()
        employee = service.create_employee(
            current_user_id=me.user_id,
            current_role=me.role,
            current_company_id=me.company_id,
            payload=data,
            login_id=data.get("loginId"),
            password_hash=optional_text(data.get("passwordHash"), "passwordHash"),
        )
        return ok(employee_to_dict(employee), "Employee created successfully", 201)

    @app.route("/api/profile/<int:employee_id>", methods=["GET"], endpoint="profile_get")
    @login_required
    def profile_get(employee_id: int):
        me = current_identity()
        return ok(
            service.get_profile(
                current_user_id=me.user_id,
                current_role=me.role,
                current_company_id=me.company_id,
                employee_id=employee_id,
            )
        )

    @app.route("/api/profile/<int:employee_id>", methods=["PUT"], endpoint="profile_update")
    @login_required
    def profile_update(employee_id: int):
        me = current_identity()
        employee = service.update_profile(
            current_user_id=me.user_id,
            current_role=me.role,
            current_company_id=me.company_id,
            employee_id=employee_id,
            changes=json_body(),
        )
        return ok(employee_to_dict(employee), "Profile updated successfully")
