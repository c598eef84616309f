from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..common.decorators import admin_required, ensure_admin_or_self, login_required
from ..common.validators import require_int
from ..core.enums import DeductionReason, SalaryStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _json() -> dict:
        return request.get_json(silent=True) or {}

    def _enum(enum_cls, value, field_name: str):
        try:
            return enum_cls(value)
        except ValueError:
            raise ValidationError(f"Invalid {field_name}: {value!r}")

    @app.route("/api/salaries/generate", methods=["POST"], endpoint="salary_generate")
    @admin_required
    def salary_generate():
        data = _json()
        record = container.salary_service.generate_monthly_salary(
            require_int(data.get("teacher_id"), "teacher_id"),
            parse_month(data.get("month") or ""),
        )
        return jsonify({"success": True, "salary": record.to_dict()})

    @app.route("/api/salaries/generate-all", methods=["POST"], endpoint="salary_generate_all")
    @admin_required
    def salary_generate_all():
        data = _json()
        result = container.salary_service.generate_monthly_salaries(
            require_int(data.get("year"), "year"),
            require_int(data.get("month"), "month"),
        )
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/salaries", methods=["GET"], endpoint="salary_list")
    @admin_required
    def salary_list():
        teacher_id = request.args.get("teacher_id")
        status = request.args.get("status")
        records = container.salary_service.list_salary_records(
            teacher_id=require_int(teacher_id, "teacher_id") if teacher_id else None,
            status=_enum(SalaryStatus, status, "status") if status else None,
        )
        return jsonify({"items": [r.to_dict() for r in records], "total": len(records)})

    @app.route("/api/salaries/<int:salary_id>", methods=["GET"], endpoint="salary_detail")
    @admin_required
    def salary_detail(salary_id: int):
        return jsonify(container.salary_service.get_salary_record(salary_id).to_dict())

    @app.route("/api/salaries/<int:salary_id>/status", methods=["POST"], endpoint="salary_change_status")
    @admin_required
    def salary_change_status(salary_id: int):
        data = _json()
        record = container.salary_service.change_status(
            salary_id,
            _enum(SalaryStatus, data.get("status"), "status"),
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "salary": record.to_dict()})

    @app.route("/api/salaries/breakdown/<int:teacher_id>/<month>", methods=["GET"], endpoint="salary_breakdown")
    @login_required
    def salary_breakdown(teacher_id: int, month: str):
        ensure_admin_or_self(teacher_id)
        return jsonify(container.salary_service.get_salary_breakdown(teacher_id, month).to_dict())

    @app.route("/api/teachers/<int:teacher_id>/salary-summary", methods=["GET"], endpoint="salary_summary")
    @login_required
    def salary_summary(teacher_id: int):
        ensure_admin_or_self(teacher_id)
        return jsonify(container.salary_service.get_teacher_salary_summary(teacher_id))

    @app.route("/api/deductions", methods=["POST"], endpoint="deduction_create")
    @admin_required
    def deduction_create():
        data = _json()
        lesson_id = data.get("lesson_id")
        deduction_id = container.salary_service.add_deduction(
            teacher_id=require_int(data.get("teacher_id"), "teacher_id"),
            amount=data.get("amount"),
            reason=_enum(DeductionReason, data.get("reason") or DeductionReason.OTHER.value, "reason"),
            lesson_id=require_int(lesson_id, "lesson_id") if lesson_id is not None else None,
            note=data.get("note"),
        )
        return jsonify({"success": True, "deduction_id": deduction_id}), 201
