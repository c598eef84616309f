from __future__ import annotations

from datetime import datetime, time

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.decorators import ensure_admin_or_self, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _window_arg(name: str, at: time):
        v = (request.args.get(name) or "").strip()
        if not v:
            return None
        return datetime.combine(parse_iso_date(v), at)

    @app.route("/api/teachers/<int:teacher_id>/obligation", methods=["GET"], endpoint="teacher_obligation")
    @login_required
    def teacher_obligation(teacher_id: int):
        ensure_admin_or_self(teacher_id)
        obligation = container.obligation_service.get_teacher_obligation(
            teacher_id,
            date_from=_window_arg("date_from", time.min),
            date_to=_window_arg("date_to", time.max),
        )
        return jsonify(obligation.to_dict())
