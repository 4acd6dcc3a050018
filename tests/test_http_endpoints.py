from __future__ import annotations

from datetime import datetime

import pytest

from src.punch_clock.punch_clock.container import Container
from src.punch_clock.punch_clock.core.exceptions import GeofenceError, NotFoundError, ValidationError
from src.punch_clock.punch_clock.costcodes.service import BackfillResult
from src.punch_clock.punch_clock.main import create_app
from src.punch_clock.punch_clock.timecards.model import TimeCard
from src.punch_clock.punch_clock.timecards.service import RecalculationResult


class StubRecalculationService:
    def __init__(self, result=None, error=None):
        self.result = result or RecalculationResult(total_processed=0, updated_count=0, skipped_count=0)
        self.error = error
        self.calls: list[dict] = []

    def recalculate(self, *, company_id, job_ids=None):
        self.calls.append({"company_id": company_id, "job_ids": job_ids})
        if self.error:
            raise self.error
        if not company_id:
            raise ValidationError("company_id is required")
        return self.result


class StubPunchService:
    def __init__(self, error=None):
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def _card(self, **kwargs):
        return TimeCard(
            timecard_id="tc-1",
            company_id="co-1",
            job_id="job-1",
            user_id="u-1",
            punch_in_time=datetime(2025, 3, 10, 8, 0),
            **kwargs,
        )

    def punch_in(self, **kwargs):
        self.calls.append(("in", kwargs))
        if self.error:
            raise self.error
        return self._card(punch_out_time=None)

    def punch_out(self, **kwargs):
        self.calls.append(("out", kwargs))
        if self.error:
            raise self.error
        return self._card(punch_out_time=datetime(2025, 3, 10, 16, 0), total_hours=7.5, break_minutes=30)


class StubBackfillService:
    def __init__(self, error=None):
        self.error = error
        self.calls: list[dict] = []

    def backfill(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return BackfillResult(processed=3, updated_time_cards=2, skipped=1)


@pytest.fixture
def services():
    return {
        "recalculation_service": StubRecalculationService(
            RecalculationResult(
                total_processed=3,
                updated_count=2,
                skipped_count=0,
                errors=[{"timecard_id": "tc-9", "error": "write conflict"}],
            )
        ),
        "punch_service": StubPunchService(),
        "backfill_service": StubBackfillService(),
    }


def _client(monkeypatch, **services):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=Container(**services))
    return app.test_client()


def test_recalculate_returns_counts_and_errors(monkeypatch, services):
    client = _client(monkeypatch, **services)

    resp = client.post("/recalculate-timecards", json={"company_id": "co-1", "job_ids": ["job-1"]})

    assert resp.status_code == 200
    assert resp.get_json() == {
        "success": True,
        "total_processed": 3,
        "updated_count": 2,
        "errors": [{"timecard_id": "tc-9", "error": "write conflict"}],
    }
    assert services["recalculation_service"].calls == [{"company_id": "co-1", "job_ids": ["job-1"]}]


def test_recalculate_without_errors_omits_key(monkeypatch, services):
    services["recalculation_service"] = StubRecalculationService()
    client = _client(monkeypatch, **services)

    resp = client.post("/recalculate-timecards", json={"company_id": "co-1"})

    assert resp.status_code == 200
    assert "errors" not in resp.get_json()


def test_recalculate_missing_company_id_is_400(monkeypatch, services):
    services["recalculation_service"] = StubRecalculationService()
    client = _client(monkeypatch, **services)

    resp = client.post("/recalculate-timecards", json={})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "company_id is required"}


def test_recalculate_store_failure_is_400_with_message(monkeypatch, services):
    services["recalculation_service"] = StubRecalculationService(error=RuntimeError("database unavailable"))
    client = _client(monkeypatch, **services)

    resp = client.post("/recalculate-timecards", json={"company_id": "co-1"})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "database unavailable"


def test_recalculate_rejects_non_object_body(monkeypatch, services):
    client = _client(monkeypatch, **services)

    resp = client.post("/recalculate-timecards", json=["co-1"])

    assert resp.status_code == 400


def test_punch_in_and_out(monkeypatch, services):
    client = _client(monkeypatch, **services)

    resp_in = client.post("/punch", json={"user_id": "u-1", "action": "in", "job_id": "job-1", "latitude": "10.5"})
    resp_out = client.post("/punch", json={"user_id": "u-1", "action": "OUT", "notes": "done"})

    assert resp_in.status_code == 200
    assert resp_in.get_json()["time_card"]["punch_out_time"] is None
    assert resp_out.status_code == 200
    body = resp_out.get_json()
    assert body["ok"] is True
    assert body["time_card"]["punch_out_time"] == "2025-03-10T16:00:00"
    assert body["time_card"]["total_hours"] == 7.5
    assert body["time_card"]["status"] == "approved"

    calls = services["punch_service"].calls
    assert calls[0] == ("in", {
        "job_id": "job-1",
        "user_id": "u-1",
        "cost_code_id": None,
        "latitude": 10.5,
        "longitude": None,
        "photo_url": None,
    })
    assert calls[1][1]["notes"] == "done"


def test_punch_invalid_action(monkeypatch, services):
    client = _client(monkeypatch, **services)

    resp = client.post("/punch", json={"user_id": "u-1", "action": "lunch"})

    assert resp.status_code == 400
    assert "Invalid action" in resp.get_json()["error"]


@pytest.mark.parametrize(
    "error, status",
    [
        (ValidationError("User is already punched in"), 400),
        (NotFoundError("Unable to find job"), 400),
        (RuntimeError("boom"), 500),
    ],
)
def test_punch_error_mapping(monkeypatch, services, error, status):
    services["punch_service"] = StubPunchService(error=error)
    client = _client(monkeypatch, **services)

    resp = client.post("/punch", json={"user_id": "u-1", "action": "in", "job_id": "job-1"})

    assert resp.status_code == status
    if status == 500:
        assert resp.get_json()["error"] == "Unexpected error"


def test_backfill_endpoint(monkeypatch, services):
    client = _client(monkeypatch, **services)

    resp = client.post("/backfill-timecard-costcodes", json={"company_id": "co-1", "days": 7, "limit": 10})

    assert resp.status_code == 200
    assert resp.get_json() == {"processed": 3, "updated_time_cards": 2, "skipped": 1}
    assert services["backfill_service"].calls == [
        {"company_id": "co-1", "days": 7, "start": None, "end": None, "limit": 10}
    ]


def test_backfill_validation_is_400_and_failure_500(monkeypatch, services):
    services["backfill_service"] = StubBackfillService(error=ValidationError("company_id is required"))
    assert _client(monkeypatch, **services).post("/backfill-timecard-costcodes", json={}).status_code == 400

    services["backfill_service"] = StubBackfillService(error=RuntimeError("db down"))
    assert _client(monkeypatch, **services).post("/backfill-timecard-costcodes", json={"company_id": "co-1"}).status_code == 500


def test_cli_recalculate_exits_nonzero_on_errors(monkeypatch, services):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=Container(**services))

    result = app.test_cli_runner().invoke(args=["recalculate-timecards", "--company-id", "co-1", "--job-id", "job-1"])

    assert result.exit_code == 1
    assert '"updated_count": 2' in result.output
    assert services["recalculation_service"].calls == [{"company_id": "co-1", "job_ids": ["job-1"]}]


def test_cli_backfill(monkeypatch, services):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=Container(**services))

    result = app.test_cli_runner().invoke(args=["backfill-costcodes", "--company-id", "co-1", "--days", "7"])

    assert result.exit_code == 0
    assert '"updated_time_cards": 2' in result.output


def test_geofence_block_is_403_with_reason(monkeypatch, services):
    services["punch_service"] = StubPunchService(
        error=GeofenceError(
            "OUT_OF_GEOFENCE_RANGE",
            "You are not at the job site and cannot punch in.",
            action="in",
            distance_from_job_meters=1112,
            distance_limit_meters=50,
        )
    )
    client = _client(monkeypatch, **services)

    resp = client.post("/punch", json={"user_id": "u-1", "action": "in", "job_id": "job-1", "latitude": 10.01, "longitude": 106})

    assert resp.status_code == 403
    assert resp.get_json() == {
        "error": "You are not at the job site and cannot punch in.",
        "code": "OUT_OF_GEOFENCE_RANGE",
        "action": "in",
        "block_reason": "OUT_OF_GEOFENCE_RANGE",
        "distance_from_job_meters": 1112,
        "distance_limit_meters": 50,
    }
