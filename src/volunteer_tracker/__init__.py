"""
Volunteer attendance tracker.

Reads volunteers, game dates and attendance records from the store and turns
them into the live dashboard and full-history overview models.
"""

from .dates import resolve_active_date, resolve_active_date_from_store  # noqa: F401
from .errors import DataIntegrityWarning, QueryError, TrackerError  # noqa: F401
from .filters import VolunteerFilters, filter_grouped, filter_scheduled, filter_volunteers  # noqa: F401
from .models import (  # noqa: F401
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
from .repository import (  # noqa: F401
    AttendanceDataRepository,
    InMemoryAttendanceRepository,
    SQLAttendanceRepository,
    build_repository,
)
from .service import VolunteerDashboardService, build_overview, build_today, volunteer_detail  # noqa: F401
