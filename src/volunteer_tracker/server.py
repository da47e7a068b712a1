"""FastAPI app that serves the volunteer attendance view models."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import load_config
from .dates import today_in
from .errors import QueryError
from .filters import VolunteerFilters, filter_grouped, filter_scheduled, filter_volunteers
from .models import OverviewModel, TodayModel, serialize
from .repository import AttendanceDataRepository, build_repository
from .service import VolunteerDashboardService

load_dotenv()

config = load_config()
logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
logger = logging.getLogger(__name__)

T = TypeVar("T")

app = FastAPI(title="Volunteer Attendance Tracker API", version="0.1.0")
repository: Optional[AttendanceDataRepository] = build_repository(config)

# The dashboard frontend is served from a different origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


class ViewResponse(BaseModel):
    data: Dict[str, Any]


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/today", response_model=ViewResponse)
def today_endpoint(
    day: Optional[dt.date] = Query(None, description="Defaults to today in the configured timezone"),
    search: str = "",
) -> ViewResponse:
    current_day = day or today_in(config.timezone)
    model = _load(lambda service: service.load_today(current_day))
    filtered = TodayModel(
        today=model.today,
        game_date=model.game_date,
        by_department=filter_scheduled(model.by_department, search),
        stats=model.stats,
    )
    return ViewResponse(data=filtered.as_dict())


@app.get("/overview", response_model=ViewResponse)
def overview_endpoint(
    search: str = "",
    department: str = "all",
    show_inactive: bool = False,
) -> ViewResponse:
    filters = _build_filters(search, department, show_inactive)
    overview: OverviewModel = _load(lambda service: service.load_overview())

    data = overview.as_dict()
    data["volunteers"] = serialize(filter_volunteers(overview.volunteers, filters))
    data["byDepartment"] = serialize(filter_grouped(overview.by_department, filters))
    data["filters"] = {
        "search": filters.search,
        "department": serialize(filters.department),
        "showInactive": filters.show_inactive,
    }
    return ViewResponse(data=data)


@app.get("/volunteers/{volunteer_id}", response_model=ViewResponse)
def volunteer_endpoint(volunteer_id: str) -> ViewResponse:
    detail = _load(lambda service: service.load_volunteer(volunteer_id))
    if detail is None:
        raise HTTPException(status_code=404, detail="Volunteer not found.")
    return ViewResponse(data=detail.as_dict())


def _build_filters(search: str, department: str, show_inactive: bool) -> VolunteerFilters:
    try:
        return VolunteerFilters(search=search, department=department, show_inactive=show_inactive)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Unknown department: {department}") from exc


def _load(load: Callable[[VolunteerDashboardService], T]) -> T:
    if repository is None:
        raise HTTPException(
            status_code=500,
            detail="VOLUNTEER_TRACKER_DATABASE_URL is not configured; no attendance data source available.",
        )
    try:
        return load(VolunteerDashboardService(repository))
    except QueryError as exc:
        # The service already logged the failure with its traceback.
        raise HTTPException(status_code=503, detail="Attendance data could not be loaded.") from exc
