from __future__ import annotations

from flask import jsonify, request

from ..core.exceptions import ValidationError


def fail(message: str, status: int = 400, **extra):
    payload = {"error": message}
    payload.update(extra)
    return jsonify(payload), status


def json_body() -> dict:
    """Request JSON as a dict; an absent/invalid body is treated as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
