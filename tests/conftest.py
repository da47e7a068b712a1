from __future__ import annotations

from datetime import date

import pytest

from volunteer_tracker.models import AttendanceRecord, AttendanceStatus, Department, GameDate, Volunteer
from volunteer_tracker.repository import InMemoryAttendanceRepository

PRESENT = AttendanceStatus.PRESENT
ABSENT = AttendanceStatus.ABSENT
SCHEDULED = AttendanceStatus.SCHEDULED


@pytest.fixture
def game_dates():
    return [
        GameDate(id="d1", date=date(2024, 3, 5)),
        GameDate(id="d2", date=date(2024, 3, 15)),
        GameDate(id="d3", date=date(2024, 3, 25), is_active=False),
    ]


@pytest.fixture
def volunteers():
    return [
        Volunteer(id="v1", first_name="Anna", last_name="Smith", department=Department.CASTER),
        Volunteer(id="v2", first_name="Joann", last_name="Lee", department=Department.MEDIA),
        Volunteer(id="v3", first_name="Ben", last_name="Cruz", department=Department.CASTER),
        Volunteer(id="v4", first_name="Cara", last_name="Diaz", department=None),
        Volunteer(id="v5", first_name="Dan", last_name="Ng", department=Department.MEDIA, is_active=False),
    ]


@pytest.fixture
def records():
    return [
        AttendanceRecord(volunteer_id="v1", date_id="d1", status=PRESENT),
        AttendanceRecord(volunteer_id="v1", date_id="d2", status=SCHEDULED),
        AttendanceRecord(volunteer_id="v2", date_id="d1", status=ABSENT),
        AttendanceRecord(volunteer_id="v2", date_id="d2", status=PRESENT),
        AttendanceRecord(volunteer_id="v3", date_id="d2", status=ABSENT),
        AttendanceRecord(volunteer_id="v4", date_id="d2", status=SCHEDULED),
        AttendanceRecord(volunteer_id="v5", date_id="d2", status=SCHEDULED),
    ]


@pytest.fixture
def repository(game_dates, volunteers, records):
    return InMemoryAttendanceRepository(game_dates=game_dates, volunteers=volunteers, records=records)
