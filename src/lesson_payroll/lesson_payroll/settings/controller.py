from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import admin_required
from ..container import Container

_FIELDS = ("penalty_absence_amd", "penalty_feedback_amd", "penalty_voice_amd", "penalty_text_amd")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/penalties", methods=["GET"], endpoint="penalties_get")
    @admin_required
    def penalties_get():
        return jsonify(container.settings_service.get_penalty_config().to_dict())

    @app.route("/api/settings/penalties", methods=["PUT"], endpoint="penalties_update")
    @admin_required
    def penalties_update():
        data = request.get_json(silent=True) or {}
        config = container.settings_service.update_penalty_config(**{name: data.get(name) for name in _FIELDS})
        return jsonify({"success": True, **config.to_dict()})
