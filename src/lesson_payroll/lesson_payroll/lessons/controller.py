from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import admin_required, ensure_admin_or_self, login_required
from ..core.enums import LessonAction
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lessons/<int:lesson_id>/obligation", methods=["GET"], endpoint="lesson_obligation")
    @login_required
    def lesson_obligation(lesson_id: int):
        ensure_admin_or_self(container.lesson_service.get_lesson(lesson_id).teacher_id)
        obligation = container.lesson_service.get_lesson_obligation(lesson_id)
        return jsonify(obligation.to_dict())

    @app.route("/api/lessons/<int:lesson_id>/actions/<action>", methods=["POST"], endpoint="lesson_mark_action")
    @login_required
    def lesson_mark_action(lesson_id: int, action: str):
        try:
            lesson_action = LessonAction(action)
        except ValueError:
            raise ValidationError(f"Unknown action {action!r}")

        ensure_admin_or_self(container.lesson_service.get_lesson(lesson_id).teacher_id)
        lesson = container.lesson_service.mark_action(lesson_id, lesson_action)
        return jsonify(
            {
                "success": True,
                "obligation": container.lesson_service.get_lesson_obligation(lesson.lesson_id).to_dict(),
            }
        )

    @app.route("/api/lessons/exclude-from-salary", methods=["POST"], endpoint="lessons_exclude_from_salary")
    @admin_required
    def lessons_exclude_from_salary():
        data = request.get_json(silent=True) or {}
        lesson_ids = data.get("lesson_ids") or []
        if not isinstance(lesson_ids, list):
            raise ValidationError("lesson_ids must be a list")

        result = container.lesson_service.exclude_lessons_from_salary(lesson_ids)
        return jsonify({"success": True, "count": result.count, "lesson_ids": result.lesson_ids})
