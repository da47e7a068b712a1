from __future__ import annotations

import logging
import warnings
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import DataIntegrityWarning
from .models import AttendanceRecord, AttendanceStatus

logger = logging.getLogger(__name__)

RecordKey = Tuple[str, str]


@dataclass
class AttendanceIndex:
    """
    Attendance records keyed by (volunteer_id, date_id).

    The store should hold at most one record per pair. When it does not, the
    first record seen wins and every later one is reported as a
    ``DataIntegrityWarning`` and kept in ``duplicates``.
    """

    records: Sequence[AttendanceRecord]
    duplicates: Sequence[AttendanceRecord] = field(init=False, default=())

    def __post_init__(self) -> None:
        by_key: Dict[RecordKey, AttendanceRecord] = {}
        duplicates: List[AttendanceRecord] = []
        for record in self.records:
            key = (record.volunteer_id, record.date_id)
            if key in by_key:
                duplicates.append(record)
                continue
            by_key[key] = record

        for record in duplicates:
            message = (
                f"Duplicate attendance record for volunteer {record.volunteer_id} on date "
                f"{record.date_id}; keeping status {by_key[(record.volunteer_id, record.date_id)].status.value}"
            )
            logger.warning(message)
            warnings.warn(message, DataIntegrityWarning, stacklevel=3)

        self.records = tuple(by_key.values())
        self.duplicates = tuple(duplicates)
        self._by_key = by_key
        self._by_volunteer: Dict[str, List[AttendanceRecord]] = defaultdict(list)
        self._by_date: Dict[str, List[AttendanceRecord]] = defaultdict(list)
        for record in self.records:
            self._by_volunteer[record.volunteer_id].append(record)
            self._by_date[record.date_id].append(record)

    def status_for(self, volunteer_id: str, date_id: str) -> Optional[AttendanceStatus]:
        record = self._by_key.get((volunteer_id, date_id))
        return record.status if record else None

    def for_volunteer(self, volunteer_id: str) -> Sequence[AttendanceRecord]:
        return tuple(self._by_volunteer.get(volunteer_id, ()))

    def for_date(self, date_id: str) -> Sequence[AttendanceRecord]:
        return tuple(self._by_date.get(date_id, ()))
