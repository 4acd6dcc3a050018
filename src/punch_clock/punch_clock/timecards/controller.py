from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import fail, json_body
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/recalculate-timecards", methods=["POST"], endpoint="recalculate_timecards")
    def recalculate_timecards():
        """Recalculate closed time cards of a company.

        Body: ``{"company_id": "...", "job_ids": [...]?}``. Any failure before the
        batch completes is reported as 400 with the exception message.
        """
        try:
            body = json_body()
            result = container.recalculation_service.recalculate(
                company_id=body.get("company_id"),
                job_ids=body.get("job_ids"),
            )
        except Exception as e:
            logger.warning("recalculate-timecards rejected: %s", e)
            return fail(str(e), 400)
        return jsonify(result.to_dict()), 200
