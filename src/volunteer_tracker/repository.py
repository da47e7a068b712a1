from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Literal, Optional, Sequence

from sqlalchemy import Date, bindparam, create_engine, text
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError

from .config import TrackerConfig, load_config
from .errors import QueryError
from .models import AttendanceRecord, AttendanceStatus, Department, GameDate, Volunteer

logger = logging.getLogger(__name__)

VolunteerOrder = Literal["department", "first_name"]


class AttendanceDataRepository:
    """
    Read-only access to game dates, volunteers and attendance records.

    Every method raises ``QueryError`` when the store cannot be read. Single-row
    lookups return ``None`` when nothing matches.
    """

    def list_game_dates(self) -> Sequence[GameDate]:
        """All game dates, ordered by date ascending."""
        raise NotImplementedError

    def list_volunteers(
        self,
        active_only: bool = False,
        order_by: VolunteerOrder = "department",
    ) -> Sequence[Volunteer]:
        """
        Volunteers ordered by department then last name, or by first name.
        """
        raise NotImplementedError

    def list_attendance_records(self, date_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_game_date_by_date(self, day: date) -> Optional[GameDate]:
        """The active game date falling on ``day``."""
        raise NotImplementedError

    def get_nearest_future_active_date(self, day: date) -> Optional[GameDate]:
        raise NotImplementedError

    def get_nearest_past_active_date(self, day: date) -> Optional[GameDate]:
        raise NotImplementedError


class SQLAttendanceRepository(AttendanceDataRepository):
    """
    Read the tracker tables through SQLAlchemy.

    Expected tables:
      - game_dates(id, date, is_active, created_at, updated_at)
      - volunteers(id, first_name, last_name, department, is_active, created_at, updated_at)
      - volunteer_date_status(volunteer_id, date_id, status, created_at, updated_at)
    """

    _GAME_DATE_COLUMNS = "id, date, is_active, created_at, updated_at"
    _VOLUNTEER_ORDER = {
        "department": "department ASC, last_name ASC",
        "first_name": "first_name ASC",
    }

    def __init__(self, engine: Engine):
        self.engine = engine

    def list_game_dates(self) -> Sequence[GameDate]:
        query = text(f"SELECT {self._GAME_DATE_COLUMNS} FROM game_dates ORDER BY date ASC")
        rows = self._fetch("list_game_dates", query)
        return tuple(self._row_to_game_date(row) for row in rows)

    def list_volunteers(
        self,
        active_only: bool = False,
        order_by: VolunteerOrder = "department",
    ) -> Sequence[Volunteer]:
        if order_by not in self._VOLUNTEER_ORDER:
            raise ValueError(f"Unsupported volunteer ordering: {order_by}")
        where = "WHERE is_active = :active" if active_only else ""
        query = text(
            f"""
            SELECT id, first_name, last_name, department, is_active, created_at, updated_at
            FROM volunteers
            {where}
            ORDER BY {self._VOLUNTEER_ORDER[order_by]}
            """
        )
        params = {"active": True} if active_only else {}
        rows = self._fetch("list_volunteers", query, params)
        return tuple(self._row_to_volunteer(row) for row in rows)

    def list_attendance_records(self, date_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        where = "WHERE date_id = :date_id" if date_id is not None else ""
        query = text(
            f"""
            SELECT volunteer_id, date_id, status, created_at, updated_at
            FROM volunteer_date_status
            {where}
            """
        )
        params = {"date_id": date_id} if date_id is not None else {}
        rows = self._fetch("list_attendance_records", query, params)
        return tuple(self._row_to_record(row) for row in rows)

    def get_game_date_by_date(self, day: date) -> Optional[GameDate]:
        query = text(
            f"""
            SELECT {self._GAME_DATE_COLUMNS}
            FROM game_dates
            WHERE date = :day AND is_active = :active
            LIMIT 1
            """
        )
        return self._fetch_one_game_date("get_game_date_by_date", query, day)

    def get_nearest_future_active_date(self, day: date) -> Optional[GameDate]:
        query = text(
            f"""
            SELECT {self._GAME_DATE_COLUMNS}
            FROM game_dates
            WHERE date > :day AND is_active = :active
            ORDER BY date ASC
            LIMIT 1
            """
        )
        return self._fetch_one_game_date("get_nearest_future_active_date", query, day)

    def get_nearest_past_active_date(self, day: date) -> Optional[GameDate]:
        query = text(
            f"""
            SELECT {self._GAME_DATE_COLUMNS}
            FROM game_dates
            WHERE date < :day AND is_active = :active
            ORDER BY date DESC
            LIMIT 1
            """
        )
        return self._fetch_one_game_date("get_nearest_past_active_date", query, day)

    def _fetch_one_game_date(self, name: str, query: Any, day: date) -> Optional[GameDate]:
        query = query.bindparams(bindparam("day", type_=Date))
        rows = self._fetch(name, query, {"day": day, "active": True})
        if not rows:
            return None
        return self._row_to_game_date(rows[0])

    def _fetch(self, name: str, query: Any, params: Optional[Dict[str, Any]] = None) -> Sequence[Row]:
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(query, params or {}).fetchall()
        except SQLAlchemyError as exc:
            raise QueryError(name, str(exc)) from exc
        logger.debug("%s returned %d rows", name, len(rows))
        return rows

    @staticmethod
    def _row_to_game_date(row: Row) -> GameDate:
        return GameDate(
            id=str(row.id),
            date=_coerce_date(row.date),
            is_active=bool(row.is_active),
            created_at=_coerce_datetime(row.created_at),
            updated_at=_coerce_datetime(row.updated_at),
        )

    @staticmethod
    def _row_to_volunteer(row: Row) -> Volunteer:
        return Volunteer(
            id=str(row.id),
            first_name=str(row.first_name or ""),
            last_name=str(row.last_name or ""),
            department=_coerce_department(row.department),
            is_active=bool(row.is_active),
            created_at=_coerce_datetime(row.created_at),
            updated_at=_coerce_datetime(row.updated_at),
        )

    @staticmethod
    def _row_to_record(row: Row) -> AttendanceRecord:
        return AttendanceRecord(
            volunteer_id=str(row.volunteer_id),
            date_id=str(row.date_id),
            status=AttendanceStatus(row.status),
            created_at=_coerce_datetime(row.created_at),
            updated_at=_coerce_datetime(row.updated_at),
        )


class InMemoryAttendanceRepository(AttendanceDataRepository):
    """
    Serve rows held in process, honouring the same ordering contract as the
    SQL repository. Useful for inline payloads and tests.
    """

    def __init__(
        self,
        game_dates: Sequence[GameDate] = (),
        volunteers: Sequence[Volunteer] = (),
        records: Sequence[AttendanceRecord] = (),
    ) -> None:
        self.game_dates = tuple(game_dates)
        self.volunteers = tuple(volunteers)
        self.records = tuple(records)

    def list_game_dates(self) -> Sequence[GameDate]:
        return tuple(sorted(self.game_dates, key=lambda game_date: game_date.date))

    def list_volunteers(
        self,
        active_only: bool = False,
        order_by: VolunteerOrder = "department",
    ) -> Sequence[Volunteer]:
        volunteers = [v for v in self.volunteers if v.is_active or not active_only]
        if order_by == "department":
            return tuple(sorted(volunteers, key=_department_order_key))
        if order_by == "first_name":
            return tuple(sorted(volunteers, key=lambda volunteer: volunteer.first_name))
        raise ValueError(f"Unsupported volunteer ordering: {order_by}")

    def list_attendance_records(self, date_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        if date_id is None:
            return self.records
        return tuple(record for record in self.records if record.date_id == date_id)

    def get_game_date_by_date(self, day: date) -> Optional[GameDate]:
        for game_date in self.game_dates:
            if game_date.is_active and game_date.date == day:
                return game_date
        return None

    def get_nearest_future_active_date(self, day: date) -> Optional[GameDate]:
        future = [gd for gd in self.list_game_dates() if gd.is_active and gd.date > day]
        return future[0] if future else None

    def get_nearest_past_active_date(self, day: date) -> Optional[GameDate]:
        past = [gd for gd in self.list_game_dates() if gd.is_active and gd.date < day]
        if not past:
            return None
        latest = max(gd.date for gd in past)
        return next(gd for gd in past if gd.date == latest)


_DEPARTMENT_POSITION = {department: index for index, department in enumerate(Department)}


def _department_order_key(volunteer: Volunteer):
    # NULL departments sort after every enum value.
    if volunteer.department is None:
        return (1, 0, volunteer.last_name)
    return (0, _DEPARTMENT_POSITION[volunteer.department], volunteer.last_name)


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def _coerce_department(value: Any) -> Optional[Department]:
    if value is None or value == "":
        return None
    try:
        return Department(str(value))
    except ValueError:
        logger.warning("Unknown department %r; treating volunteer as unassigned", value)
        return None


def build_repository(config: Optional[TrackerConfig] = None) -> Optional[AttendanceDataRepository]:
    cfg = config or load_config()
    if cfg.database_url:
        engine = create_engine(cfg.database_url, pool_pre_ping=cfg.pool_pre_ping)
        return SQLAttendanceRepository(engine)
    return None
