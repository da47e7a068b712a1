from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from .dataset import AttendanceIndex
from .dates import resolve_active_date_from_store
from .errors import QueryError
from .models import (
    AttendanceRecord,
    AttendanceStatus,
    DashboardStats,
    Department,
    GameDate,
    OverviewModel,
    ScheduledVolunteer,
    StatusSummary,
    TodayModel,
    Volunteer,
    VolunteerAttendance,
    VolunteerDetail,
)
from .repository import AttendanceDataRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIVE_STATUSES = {AttendanceStatus.SCHEDULED, AttendanceStatus.PRESENT}


def summarize(records: Iterable[AttendanceRecord]) -> StatusSummary:
    counts = Counter(record.status for record in records)
    return StatusSummary(
        scheduled=counts[AttendanceStatus.SCHEDULED],
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
    )


def group_by_department(
    entries: Iterable[T],
    volunteer_of: Callable[[T], Volunteer],
) -> Dict[Department, List[T]]:
    """
    Bucket entries by their volunteer's department, ``n/a`` for none.

    Bucket order and the order inside each bucket follow the input order.
    """

    grouped: Dict[Department, List[T]] = {}
    for entry in entries:
        grouped.setdefault(volunteer_of(entry).department_key, []).append(entry)
    return grouped


def build_overview(
    game_dates: Sequence[GameDate],
    volunteers: Sequence[Volunteer],
    records: Sequence[AttendanceRecord],
) -> OverviewModel:
    """
    Enrich every volunteer with one status per game date and a summary.

    Only records for known game dates count towards the summary, so the
    summary always agrees with the status mapping.
    """

    index = AttendanceIndex(records)
    date_ids = [game_date.id for game_date in game_dates]
    known = set(date_ids)

    enriched = []
    for volunteer in volunteers:
        statuses = {date_id: index.status_for(volunteer.id, date_id) for date_id in date_ids}
        history = [record for record in index.for_volunteer(volunteer.id) if record.date_id in known]
        enriched.append(VolunteerAttendance(volunteer=volunteer, statuses=statuses, summary=summarize(history)))

    by_department = group_by_department(enriched, lambda entry: entry.volunteer)
    return OverviewModel(game_dates=tuple(game_dates), volunteers=tuple(enriched), by_department=by_department)


def build_today(
    game_date: Optional[GameDate],
    volunteers: Sequence[Volunteer],
    records: Sequence[AttendanceRecord],
    today: date,
) -> TodayModel:
    """
    List the active volunteers scheduled or present on ``game_date``.

    ``records`` may hold rows for other dates; only those for ``game_date``
    are considered. Absent volunteers are left out of the list.
    """

    if game_date is None:
        return TodayModel(today=today)

    index = AttendanceIndex([record for record in records if record.date_id == game_date.id])

    scheduled = []
    for volunteer in volunteers:
        if not volunteer.is_active:
            continue
        status = index.status_for(volunteer.id, game_date.id)
        if status in LIVE_STATUSES:
            scheduled.append(ScheduledVolunteer(volunteer=volunteer, status=status))

    by_department = group_by_department(scheduled, lambda entry: entry.volunteer)
    day_records = index.for_date(game_date.id)
    stats = DashboardStats(
        total=len(scheduled),
        present=sum(1 for record in day_records if record.status == AttendanceStatus.PRESENT),
        scheduled=sum(1 for record in day_records if record.status == AttendanceStatus.SCHEDULED),
        departments=len(by_department),
    )
    return TodayModel(today=today, game_date=game_date, by_department=by_department, stats=stats)


def volunteer_detail(overview: OverviewModel, volunteer_id: str) -> Optional[VolunteerDetail]:
    for entry in overview.volunteers:
        if entry.volunteer.id == volunteer_id:
            history = [(game_date, entry.statuses.get(game_date.id)) for game_date in overview.game_dates]
            return VolunteerDetail(attendance=entry, history=history)
    return None


class VolunteerDashboardService:
    """
    Run a complete load cycle against the store and aggregate the result.

    A cycle either returns a full model or raises ``QueryError``; nothing
    partial is ever returned and failed reads are not retried.
    """

    def __init__(self, repository: AttendanceDataRepository) -> None:
        self.repository = repository

    def load_overview(self) -> OverviewModel:
        try:
            game_dates = self.repository.list_game_dates()
            volunteers = self.repository.list_volunteers(order_by="department")
            records = self.repository.list_attendance_records()
        except QueryError:
            logger.exception("Overview load abandoned")
            raise

        overview = build_overview(game_dates, volunteers, records)
        logger.info(
            "Overview built: %d volunteers, %d game dates, %d departments",
            len(overview.volunteers),
            len(overview.game_dates),
            len(overview.by_department),
        )
        return overview

    def load_today(self, today: date) -> TodayModel:
        try:
            game_date = resolve_active_date_from_store(self.repository, today)
            if game_date is None:
                return TodayModel(today=today)
            volunteers = self.repository.list_volunteers(active_only=True, order_by="first_name")
            records = self.repository.list_attendance_records(date_id=game_date.id)
        except QueryError:
            logger.exception("Dashboard load abandoned for %s", today.isoformat())
            raise

        model = build_today(game_date, volunteers, records, today)
        logger.info(
            "Dashboard built for %s: %d scheduled, %d present",
            game_date.date.isoformat(),
            model.stats.total,
            model.stats.present,
        )
        return model

    def load_volunteer(self, volunteer_id: str) -> Optional[VolunteerDetail]:
        return volunteer_detail(self.load_overview(), volunteer_id)
