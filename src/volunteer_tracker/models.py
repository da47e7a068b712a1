from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


class Department(str, Enum):
    """Departments a volunteer can belong to, in the store's declaration order."""

    CASTER = "caster"
    COSPLAY = "cosplay"
    CREATIVES = "creatives"
    HOST = "host"
    MEDIA = "media"
    PRODUCTION = "production"
    SOCMED = "socmed"
    SPONSORSHIP = "sponsorship"
    WRITER = "writer"
    NA = "n/a"


class AttendanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class Volunteer:
    id: str
    first_name: str
    last_name: str
    department: Optional[Department] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def department_key(self) -> Department:
        """Grouping key; volunteers without a department land in ``n/a``."""
        return self.department or Department.NA


@dataclass(frozen=True)
class GameDate:
    """One scheduled event day. ``date`` is a calendar date with no time part."""

    id: str
    date: date
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    volunteer_id: str
    date_id: str
    status: AttendanceStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StatusSummary:
    scheduled: int = 0
    present: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.scheduled + self.present + self.absent

    @property
    def attendance_rate(self) -> float:
        total = self.total
        return self.present / total * 100 if total else 0.0


@dataclass(frozen=True)
class VolunteerAttendance:
    """
    A volunteer enriched with their full attendance history.

    ``statuses`` holds one entry per known game date id, ``None`` where the
    volunteer has no record for that date.
    """

    volunteer: Volunteer
    statuses: Dict[str, Optional[AttendanceStatus]] = field(default_factory=dict)
    summary: StatusSummary = field(default_factory=StatusSummary)


@dataclass(frozen=True)
class ScheduledVolunteer:
    volunteer: Volunteer
    status: AttendanceStatus


@dataclass(frozen=True)
class DashboardStats:
    total: int = 0
    present: int = 0
    scheduled: int = 0
    departments: int = 0

    @property
    def attendance_rate(self) -> int:
        if not self.total:
            return 0
        # Rounds half up.
        return int(self.present / self.total * 100 + 0.5)


@dataclass(frozen=True)
class OverviewModel:
    game_dates: Sequence[GameDate]
    volunteers: Sequence[VolunteerAttendance]
    by_department: Dict[Department, List[VolunteerAttendance]] = field(default_factory=dict)

    @property
    def departments(self) -> List[Department]:
        return list(self.by_department)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "gameDates": serialize(self.game_dates),
            "volunteers": serialize(self.volunteers),
            "byDepartment": serialize(self.by_department),
            "departments": [department.value for department in self.departments],
        }


@dataclass(frozen=True)
class TodayModel:
    today: date
    game_date: Optional[GameDate] = None
    by_department: Dict[Department, List[ScheduledVolunteer]] = field(default_factory=dict)
    stats: DashboardStats = field(default_factory=DashboardStats)

    @property
    def is_fallback(self) -> bool:
        """True when the shown schedule is not for ``today`` itself."""
        return self.game_date is not None and self.game_date.date != self.today

    def as_dict(self) -> Dict[str, Any]:
        return {
            "today": self.today.isoformat(),
            "gameDate": serialize(self.game_date),
            "isFallback": self.is_fallback,
            "byDepartment": serialize(self.by_department),
            "stats": serialize(self.stats),
        }


@dataclass(frozen=True)
class VolunteerDetail:
    attendance: VolunteerAttendance
    history: Sequence[Tuple[GameDate, Optional[AttendanceStatus]]]

    def as_dict(self) -> Dict[str, Any]:
        payload = serialize(self.attendance)
        payload["history"] = [
            {"date": serialize(game_date), "status": serialize(status)}
            for game_date, status in self.history
        ]
        return payload


def serialize(obj: Any) -> Any:
    """
    Convert the view-model dataclasses into a JSON-serialisable structure.

    Keys are camelCased for the frontend; enums collapse to their values and
    dates to ISO strings.
    """

    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Volunteer):
        return {
            "id": obj.id,
            "firstName": obj.first_name,
            "lastName": obj.last_name,
            "fullName": obj.full_name,
            "department": serialize(obj.department),
            "isActive": obj.is_active,
            "createdAt": serialize(obj.created_at),
            "updatedAt": serialize(obj.updated_at),
        }
    if isinstance(obj, GameDate):
        return {
            "id": obj.id,
            "date": obj.date.isoformat(),
            "isActive": obj.is_active,
        }
    if isinstance(obj, StatusSummary):
        return {
            "scheduled": obj.scheduled,
            "present": obj.present,
            "absent": obj.absent,
            "total": obj.total,
            "attendanceRate": obj.attendance_rate,
        }
    if isinstance(obj, VolunteerAttendance):
        payload = serialize(obj.volunteer)
        payload["statuses"] = {date_id: serialize(status) for date_id, status in obj.statuses.items()}
        payload["statusSummary"] = serialize(obj.summary)
        return payload
    if isinstance(obj, ScheduledVolunteer):
        payload = serialize(obj.volunteer)
        payload["status"] = serialize(obj.status)
        return payload
    if isinstance(obj, DashboardStats):
        return {
            "total": obj.total,
            "present": obj.present,
            "scheduled": obj.scheduled,
            "departments": obj.departments,
            "attendanceRate": obj.attendance_rate,
        }
    if isinstance(obj, dict):
        return {serialize(key): serialize(value) for key, value in obj.items()}
    if isinstance(obj, Iterable) and not isinstance(obj, (str, bytes)):
        return [serialize(item) for item in obj]
    return obj
