from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import GameDate
from .repository import AttendanceDataRepository

logger = logging.getLogger(__name__)


def _coerce_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return timezone.utc


def today_in(timezone_name: str, now: Optional[datetime] = None) -> date:
    """Calendar date of ``now`` (default: the current instant) in ``timezone_name``."""
    tz = _coerce_timezone(timezone_name)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(tz).date()


def resolve_active_date(today: date, game_dates: Iterable[GameDate]) -> Optional[GameDate]:
    """
    Pick the game date the live dashboard should show.

    In order: today's active date, else the nearest active date after today,
    else the nearest active date before today, else ``None``. Ties keep the
    first row in input order.
    """

    active = [game_date for game_date in game_dates if game_date.is_active]

    for game_date in active:
        if game_date.date == today:
            return game_date

    nearest_future: Optional[GameDate] = None
    nearest_past: Optional[GameDate] = None
    for game_date in active:
        if game_date.date > today:
            if nearest_future is None or game_date.date < nearest_future.date:
                nearest_future = game_date
        elif game_date.date < today:
            if nearest_past is None or game_date.date > nearest_past.date:
                nearest_past = game_date

    return nearest_future or nearest_past


def resolve_active_date_from_store(repository: AttendanceDataRepository, today: date) -> Optional[GameDate]:
    """
    Same fallback chain as ``resolve_active_date`` driven by the store's lookups.

    A lookup that finds nothing moves on to the next step; ``QueryError``
    propagates to the caller.
    """

    game_date = repository.get_game_date_by_date(today)
    if game_date is None:
        game_date = repository.get_nearest_future_active_date(today)
    if game_date is None:
        game_date = repository.get_nearest_past_active_date(today)

    if game_date is None:
        logger.info("No active game date around %s", today.isoformat())
    elif game_date.date != today:
        logger.info("No game on %s, showing %s instead", today.isoformat(), game_date.date.isoformat())
    return game_date
