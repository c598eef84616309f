from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_int(value: Any, field_name: str) -> int:
    """Accept ints, integral floats and integer strings from JSON forms, reject the rest.

    Strings are parsed with ``int()`` first so large values keep full precision.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be an integer. Received: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer. Received: {value!r}")
    if not number.is_integer():
        raise ValidationError(f"{field_name} must be an integer. Received: {value!r}")
    return int(number)


def require_non_negative_int(value: Any, field_name: str) -> int:
    number = require_int(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} must be >= 0. Received: {value!r}")
    return number


def require_positive_int(value: Any, field_name: str) -> int:
    number = require_non_negative_int(value, field_name)
    if number == 0:
        raise ValidationError(f"{field_name} must be > 0")
    return number
