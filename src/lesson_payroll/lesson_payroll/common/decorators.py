from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "role" not in session:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "role" not in session:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def ensure_admin_or_self(teacher_id: int) -> None:
    """Teachers may only read their own obligation and salary data."""
    if session.get("role") == Role.ADMIN.value:
        return
    own_id = session.get("teacher_id")
    if session.get("role") == Role.TEACHER.value and own_id is not None and int(own_id) == int(teacher_id):
        return
    raise AuthorizationError("You can only view your own data")
