from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.datetime_utils import to_iso
from ..common.http import fail, json_body
from ..common.validators import optional_float
from ..container import Container
from ..core.exceptions import DomainError, GeofenceError, ValidationError
from ..timecards.model import TimeCard

logger = logging.getLogger(__name__)


def _card_to_dict(card: TimeCard) -> dict:
    return {
        "timecard_id": card.timecard_id,
        "company_id": card.company_id,
        "job_id": card.job_id,
        "user_id": card.user_id,
        "cost_code_id": card.cost_code_id,
        "punch_in_time": to_iso(card.punch_in_time),
        "punch_out_time": to_iso(card.punch_out_time),
        "total_hours": card.total_hours,
        "overtime_hours": card.overtime_hours,
        "break_minutes": card.break_minutes,
        "status": card.status.value,
        "requires_approval": card.requires_approval,
        "distance_warning": card.distance_warning,
        "notes": card.notes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/punch", methods=["POST"], endpoint="punch")
    def punch():
        """Punch in or out: ``{"user_id", "action": "in"|"out", "job_id"?, "cost_code_id"?, ...}``."""
        try:
            body = json_body()
            action = (body.get("action") or "").strip().lower()
            common = {
                "user_id": body.get("user_id"),
                "cost_code_id": body.get("cost_code_id") or None,
                "latitude": optional_float(body.get("latitude"), "latitude"),
                "longitude": optional_float(body.get("longitude"), "longitude"),
                "photo_url": body.get("photo_url") or None,
            }

            if action == "in":
                card = container.punch_service.punch_in(job_id=body.get("job_id"), **common)
            elif action == "out":
                card = container.punch_service.punch_out(notes=body.get("notes"), **common)
            else:
                raise ValidationError("Invalid action. Use 'in' or 'out'")
        except GeofenceError as e:
            return jsonify(e.to_dict()), 403
        except DomainError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("punch failed")
            return fail("Unexpected error", 500)

        return jsonify({"ok": True, "time_card": _card_to_dict(card)}), 200
