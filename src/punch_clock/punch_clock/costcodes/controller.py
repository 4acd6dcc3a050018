from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import fail, json_body
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/backfill-timecard-costcodes", methods=["POST"], endpoint="backfill_timecard_costcodes")
    def backfill_timecard_costcodes():
        try:
            body = json_body()
            result = container.backfill_service.backfill(
                company_id=body.get("company_id"),
                days=body.get("days"),
                start=body.get("from"),
                end=body.get("to"),
                limit=body.get("limit"),
            )
        except ValidationError as e:
            return fail(str(e), 400)
        except Exception as e:
            logger.exception("backfill-timecard-costcodes failed")
            return fail(str(e) or "Unexpected error", 500)
        return jsonify(result.to_dict()), 200
