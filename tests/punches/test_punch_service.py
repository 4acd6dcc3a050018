from __future__ import annotations

from dataclasses import replace
from datetime import datetime, time

import pytest

from src.punch_clock.punch_clock.core.enums import PunchType, TimeCardStatus
from src.punch_clock.punch_clock.core.exceptions import GeofenceError, NotFoundError, ValidationError
from src.punch_clock.punch_clock.costcodes.model import CostCode
from src.punch_clock.punch_clock.geofence.model import GeofenceSettings
from src.punch_clock.punch_clock.jobs.model import JobShiftConfig
from src.punch_clock.punch_clock.punches.model import PunchRecord
from src.punch_clock.punch_clock.punches.service import PunchService
from src.punch_clock.punch_clock.settings.model import PunchClockSettings
from src.punch_clock.punch_clock.timecards.model import TimeCard


class FakeTimeCardsRepo:
    def __init__(self):
        self._next_id = 1
        self.cards: dict[str, TimeCard] = {}

    def get_by_id(self, timecard_id):
        return self.cards.get(timecard_id)

    def get_open_for_user(self, user_id):
        for c in self.cards.values():
            if c.user_id == user_id and c.punch_out_time is None and c.deleted_at is None:
                return c
        return None

    def create_open(self, *, company_id, job_id, user_id, punch_in_time, cost_code_id=None, latitude=None, longitude=None):
        tid = f"tc-{self._next_id}"
        self._next_id += 1
        self.cards[tid] = TimeCard(
            timecard_id=tid,
            company_id=company_id,
            job_id=job_id,
            user_id=user_id,
            punch_in_time=punch_in_time,
            punch_out_time=None,
            cost_code_id=cost_code_id,
            punch_in_latitude=latitude,
            punch_in_longitude=longitude,
        )
        return tid

    def close(self, *, timecard_id, closure):
        card = self.cards.get(timecard_id)
        if not card or card.punch_out_time is not None:
            return False
        adj = closure.adjustment
        self.cards[timecard_id] = replace(
            card,
            punch_in_time=adj.punch_in_time,
            punch_out_time=adj.punch_out_time,
            total_hours=adj.total_hours,
            overtime_hours=adj.overtime_hours,
            break_minutes=adj.break_minutes,
            cost_code_id=closure.cost_code_id,
            status=closure.status,
            requires_approval=closure.requires_approval,
            distance_warning=closure.distance_warning,
            notes=closure.notes,
            punch_out_latitude=closure.punch_out_latitude,
            punch_out_longitude=closure.punch_out_longitude,
        )
        return True


class FakePunchesRepo:
    def __init__(self):
        self.records: list[PunchRecord] = []

    def create(self, *, user_id, company_id, job_id, punch_type, punch_time, cost_code_id=None, latitude=None, longitude=None, photo_url=None):
        pid = f"p-{len(self.records) + 1}"
        self.records.append(
            PunchRecord(
                punch_id=pid,
                user_id=user_id,
                company_id=company_id,
                job_id=job_id,
                punch_type=punch_type,
                punch_time=punch_time,
                cost_code_id=cost_code_id,
                latitude=latitude,
                longitude=longitude,
                photo_url=photo_url,
            )
        )
        return pid

    def fill_missing_cost_code(self, *, user_id, job_id, punch_type, start, end, cost_code_id):
        changed = 0
        for i, p in enumerate(self.records):
            if (
                p.user_id == user_id
                and p.job_id == job_id
                and p.punch_type == punch_type
                and start <= p.punch_time <= end
                and not p.cost_code_id
            ):
                self.records[i] = replace(p, cost_code_id=cost_code_id)
                changed += 1
        return changed


class FakeJobsRepo:
    def __init__(self, *configs):
        self.configs = {c.job_id: c for c in configs}

    def get_by_id(self, job_id):
        return self.configs.get(job_id)


class FakeSettingsRepo:
    def __init__(self, settings=None):
        self.settings = settings

    def get_for_job(self, *, company_id, job_id):
        return None

    def get_company_default(self, *, company_id):
        return self.settings


class FakeGeofenceRepo:
    def __init__(self, rows=(), *, broken=False):
        self.rows = list(rows)
        self.broken = broken

    def list_for_user(self, *, user_id, company_id):
        if self.broken:
            raise RuntimeError("settings table missing")
        return list(self.rows)


class FakeCostCodesRepo:
    def __init__(self, *codes):
        self.codes = {c.cost_code_id: c for c in codes}

    def get_by_id(self, cost_code_id):
        return self.codes.get(cost_code_id)


JOB = JobShiftConfig(
    job_id="job-1",
    company_id="co-1",
    shift_start_time=time(8, 0),
    shift_end_time=time(16, 0),
    count_late_punch_out=False,
    latitude=10.0,
    longitude=106.0,
)
OTHER_JOB = JobShiftConfig(job_id="job-2", company_id="co-1")

DAY = datetime(2025, 3, 10)


def _at(hour, minute=0, *, day=DAY):
    return day.replace(hour=hour, minute=minute)


def _service(settings=None, geofence=None):
    timecards = FakeTimeCardsRepo()
    punches = FakePunchesRepo()
    svc = PunchService(
        timecards,
        punches,
        FakeJobsRepo(JOB, OTHER_JOB),
        FakeSettingsRepo(settings),
        FakeCostCodesRepo(
            CostCode(cost_code_id="cc-1", job_id="job-1", code="FRAMING"),
            CostCode(cost_code_id="cc-2", job_id="job-2", code="ROOF"),
            CostCode(cost_code_id="cc-old", job_id="job-1", code="OLD", is_active=False),
        ),
        geofence or FakeGeofenceRepo(),
    )
    return svc, timecards, punches


def test_punch_in_opens_card_and_records_punch():
    svc, timecards, punches = _service()

    card = svc.punch_in(user_id="u-1", job_id="job-1", cost_code_id="cc-1", latitude=10.0, longitude=20.0, now=_at(7, 55))

    assert card.punch_out_time is None
    assert card.punch_in_time == _at(7, 55)
    assert card.company_id == "co-1"
    assert card.cost_code_id == "cc-1"
    assert [p.punch_type for p in punches.records] == [PunchType.PUNCHED_IN]


def test_punch_in_twice_is_rejected():
    svc, _, _ = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8))

    with pytest.raises(ValidationError, match="already punched in"):
        svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8, 5))


def test_punch_in_unknown_job():
    svc, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.punch_in(user_id="u-1", job_id="nope", now=_at(8))


@pytest.mark.parametrize(
    "cost_code_id, message",
    [
        ("missing", "Invalid cost code"),
        ("cc-old", "Invalid cost code"),
        ("cc-2", "does not belong"),
    ],
)
def test_punch_in_rejects_bad_cost_code(cost_code_id, message):
    svc, timecards, _ = _service()

    with pytest.raises(ValidationError, match=message):
        svc.punch_in(user_id="u-1", job_id="job-1", cost_code_id=cost_code_id, now=_at(8))
    assert timecards.cards == {}


def test_punch_out_closes_card_with_adjusted_hours():
    svc, timecards, punches = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", now=_at(7, 50))

    card = svc.punch_out(user_id="u-1", now=_at(16, 10))

    assert card.punch_in_time == _at(8)
    assert card.punch_out_time == _at(16)
    assert card.total_hours == pytest.approx(7.5)
    assert card.break_minutes == 30
    assert card.status == TimeCardStatus.APPROVED
    assert card.requires_approval is False
    assert [p.punch_type for p in punches.records] == [PunchType.PUNCHED_IN, PunchType.PUNCHED_OUT]
    # raw punch times stay untouched in the punch log
    assert punches.records[0].punch_time == _at(7, 50)
    assert timecards.get_open_for_user("u-1") is None


def test_punch_out_without_open_card():
    svc, _, _ = _service()

    with pytest.raises(ValidationError, match="not currently punched in"):
        svc.punch_out(user_id="u-1", now=_at(16))


def test_punch_out_before_punch_in_is_rejected():
    svc, _, _ = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", now=_at(9))

    with pytest.raises(ValidationError, match="earlier than punch-in"):
        svc.punch_out(user_id="u-1", now=_at(8))


def test_cost_code_on_punch_out_is_carried_to_punch_in():
    svc, _, punches = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8))

    card = svc.punch_out(user_id="u-1", cost_code_id="cc-1", now=_at(12))

    assert card.cost_code_id == "cc-1"
    assert [p.cost_code_id for p in punches.records] == ["cc-1", "cc-1"]


def test_long_card_is_flagged_for_approval():
    svc, _, _ = _service(PunchClockSettings(flag_timecards_over_12hrs=True))
    svc.punch_in(user_id="u-1", job_id="job-2", now=_at(6))

    card = svc.punch_out(user_id="u-1", now=_at(20))

    assert card.total_hours == pytest.approx(13.5)
    assert card.status == TimeCardStatus.PENDING
    assert card.requires_approval is True
    assert card.distance_warning is False


def test_long_card_flag_can_be_disabled():
    svc, _, _ = _service(PunchClockSettings(flag_timecards_over_12hrs=False, flag_timecards_over_24hrs=False))
    svc.punch_in(user_id="u-1", job_id="job-2", now=_at(6))

    card = svc.punch_out(user_id="u-1", now=_at(20))

    assert card.status == TimeCardStatus.APPROVED


def test_distant_punch_out_gets_distance_warning():
    svc, _, _ = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.0, longitude=106.0, now=_at(8))

    # ~1.1 km north
    card = svc.punch_out(user_id="u-1", latitude=10.01, longitude=106.0, notes="left site", now=_at(12))

    assert card.distance_warning is True
    assert card.requires_approval is True
    assert card.status == TimeCardStatus.PENDING
    assert card.notes.startswith("left site | Punch-out location differs from punch-in")


def test_nearby_punch_out_is_approved():
    svc, _, _ = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.0, longitude=106.0, now=_at(8))

    card = svc.punch_out(user_id="u-1", latitude=10.001, longitude=106.0, now=_at(12))

    assert card.distance_warning is False
    assert card.status == TimeCardStatus.APPROVED


ENFORCED = GeofenceSettings(enforce_punch_distance=True, distance_limit_meters=50)


def test_no_geofence_settings_allows_punch_without_location():
    svc, _, _ = _service(geofence=FakeGeofenceRepo([]))

    card = svc.punch_in(user_id="u-1", job_id="job-2", now=_at(8))

    assert card.punch_out_time is None


def test_disabled_geofence_allows_far_punch():
    svc, _, _ = _service(geofence=FakeGeofenceRepo([GeofenceSettings(enforce_punch_distance=False)]))

    card = svc.punch_in(user_id="u-1", job_id="job-1", latitude=11.0, longitude=106.0, now=_at(8))

    assert card.punch_in_latitude == 11.0


def test_geofence_blocks_job_without_site_location():
    svc, timecards, punches = _service(geofence=FakeGeofenceRepo([ENFORCED]))

    with pytest.raises(GeofenceError) as exc:
        svc.punch_in(user_id="u-1", job_id="job-2", latitude=10.0, longitude=106.0, now=_at(8))

    assert exc.value.code == "JOB_LOCATION_MISSING"
    assert timecards.cards == {}
    assert punches.records == []


def test_geofence_requires_device_location():
    svc, _, _ = _service(geofence=FakeGeofenceRepo([ENFORCED]))

    with pytest.raises(GeofenceError, match="Location is required to punch in") as exc:
        svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8))

    assert exc.value.code == "LOCATION_REQUIRED"


def test_geofence_blocks_punch_in_out_of_range():
    svc, timecards, _ = _service(geofence=FakeGeofenceRepo([ENFORCED]))

    # ~1.1 km north of the site
    with pytest.raises(GeofenceError) as exc:
        svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.01, longitude=106.0, now=_at(8))

    err = exc.value
    assert err.code == "OUT_OF_GEOFENCE_RANGE"
    assert err.action == "in"
    assert 1100 <= err.distance_from_job_meters <= 1125
    assert err.distance_limit_meters == 50
    assert err.to_dict()["block_reason"] == "OUT_OF_GEOFENCE_RANGE"
    assert timecards.cards == {}


def test_geofence_allows_punch_inside_range():
    svc, _, _ = _service(geofence=FakeGeofenceRepo([ENFORCED]))

    # ~22 m from the site
    card = svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.0002, longitude=106.0, now=_at(8))

    assert card.punch_out_time is None


def test_enabled_geofence_row_wins_over_newer_disabled_row():
    rows = [GeofenceSettings(enforce_punch_distance=False), ENFORCED]
    svc, _, _ = _service(geofence=FakeGeofenceRepo(rows))

    with pytest.raises(GeofenceError):
        svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.01, longitude=106.0, now=_at(8))


def test_geofence_blocks_punch_out_and_keeps_card_open():
    geofence = FakeGeofenceRepo([])
    svc, timecards, punches = _service(geofence=geofence)
    svc.punch_in(user_id="u-1", job_id="job-1", latitude=10.0, longitude=106.0, now=_at(8))
    geofence.rows = [ENFORCED]

    with pytest.raises(GeofenceError, match="cannot punch out") as exc:
        svc.punch_out(user_id="u-1", latitude=10.01, longitude=106.0, now=_at(16))

    assert exc.value.action == "out"
    assert timecards.get_open_for_user("u-1") is not None
    assert [p.punch_type for p in punches.records] == [PunchType.PUNCHED_IN]


def test_geofence_lookup_failure_does_not_block():
    svc, _, _ = _service(geofence=FakeGeofenceRepo(broken=True))

    card = svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8))

    assert card.punch_out_time is None


def test_rejected_close_writes_no_punch_out_record():
    svc, timecards, punches = _service()
    svc.punch_in(user_id="u-1", job_id="job-1", now=_at(8))
    timecards.close = lambda **kwargs: False

    with pytest.raises(ValidationError, match="already closed"):
        svc.punch_out(user_id="u-1", cost_code_id="cc-1", now=_at(12))

    assert [p.punch_type for p in punches.records] == [PunchType.PUNCHED_IN]
    assert punches.records[0].cost_code_id is None
