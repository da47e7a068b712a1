from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from .models import Department, Volunteer

T = TypeVar("T")

ALL_DEPARTMENTS = "all"


@dataclass(frozen=True)
class VolunteerFilters:
    """
    View filters owned by the caller.

    ``department`` is either ``"all"`` or a department value; an unknown value
    raises ``ValueError``. Inactive volunteers are hidden unless
    ``show_inactive`` is set.
    """

    search: str = ""
    department: Union[str, Department] = ALL_DEPARTMENTS
    show_inactive: bool = False

    def __post_init__(self) -> None:
        if self.department != ALL_DEPARTMENTS and not isinstance(self.department, Department):
            object.__setattr__(self, "department", Department(self.department))

    @property
    def selected_department(self) -> Optional[Department]:
        return None if self.department == ALL_DEPARTMENTS else self.department


def _volunteer(entry) -> Volunteer:
    return entry if isinstance(entry, Volunteer) else entry.volunteer


def matches_name(volunteer: Volunteer, search: str) -> bool:
    if not search.strip():
        return True
    return search.lower() in volunteer.full_name.lower()


def _matches_person(volunteer: Volunteer, filters: VolunteerFilters) -> bool:
    if not (filters.show_inactive or volunteer.is_active):
        return False
    return matches_name(volunteer, filters.search)


def filter_volunteers(entries: Iterable[T], filters: VolunteerFilters) -> List[T]:
    selected = filters.selected_department
    result = []
    for entry in entries:
        volunteer = _volunteer(entry)
        if selected is not None and volunteer.department_key != selected:
            continue
        if _matches_person(volunteer, filters):
            result.append(entry)
    return result


def filter_grouped(grouping: Mapping[Department, List[T]], filters: VolunteerFilters) -> Dict[Department, List[T]]:
    """Filter every department bucket, dropping buckets left empty."""
    selected = filters.selected_department
    result: Dict[Department, List[T]] = {}
    for department, entries in grouping.items():
        if selected is not None and department != selected:
            continue
        kept = [entry for entry in entries if _matches_person(_volunteer(entry), filters)]
        if kept:
            result[department] = kept
    return result


def filter_scheduled(grouping: Mapping[Department, List[T]], search: str = "") -> Dict[Department, List[T]]:
    """Name-only filter used by the live dashboard."""
    result: Dict[Department, List[T]] = {}
    for department, entries in grouping.items():
        kept = [entry for entry in entries if matches_name(_volunteer(entry), search)]
        if kept:
            result[department] = kept
    return result
