"""
Demand Resolver

Turns the branch's recurring weekly templates and its special dates into
the concrete demand lines of each day of a month.

A special date with at least one active template REPLACES the weekday
templates of that date; the two sets are never merged.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from grimorio.models.shift_template import ShiftTemplate
from grimorio.models.special_date import SpecialDate
from grimorio.services.month_calendar import iter_dates
from grimorio.services.work_hours import calculate_worked_hours

SOURCE_WEEKLY = "weekly"
SOURCE_SPECIAL = "special"

UNKNOWN_AREA = "Unknown area"
UNKNOWN_ROLE = "Unknown role"
DEFAULT_AREA_COLOR = "#808080"


@dataclass
class DemandLine:
    """One (area, role, time window, headcount) requirement for a date."""
    date: date
    source: str
    source_id: int
    work_area_id: int
    work_area_name: str
    work_area_color: str
    work_area_order: int
    work_role_id: int
    work_role_name: str
    start_time: time
    end_time: time
    break_minutes: Optional[int]
    lunch_minutes: Optional[int]
    required_count: int
    worked_hours: Decimal
    notes: Optional[str] = None
    special_date_name: Optional[str] = None

    @property
    def required_hours(self) -> Decimal:
        return self.worked_hours * self.required_count


def _line_from(template, target_date: date, source: str, special_date_name: Optional[str] = None) -> DemandLine:
    area = template.work_area
    role = template.work_role
    return DemandLine(
        date=target_date,
        source=source,
        source_id=template.id,
        work_area_id=template.work_area_id,
        work_area_name=area.name if area else UNKNOWN_AREA,
        work_area_color=area.color if area and area.color else DEFAULT_AREA_COLOR,
        work_area_order=(area.display_order or 0) if area else 0,
        work_role_id=template.work_role_id,
        work_role_name=role.name if role else UNKNOWN_ROLE,
        start_time=template.start_time,
        end_time=template.end_time,
        break_minutes=template.break_minutes,
        lunch_minutes=template.lunch_minutes,
        required_count=template.required_count or 0,
        worked_hours=calculate_worked_hours(
            template.start_time, template.end_time,
            template.break_minutes, template.lunch_minutes
        ),
        notes=template.notes,
        special_date_name=special_date_name
    )


def _line_order(line: DemandLine):
    return (line.start_time, line.work_area_order, line.source_id)


class DemandResolver:
    """Pre-built weekday -> templates and date -> special date indices."""

    def __init__(self, templates: Iterable[ShiftTemplate], special_dates: Iterable[SpecialDate] = ()):
        self._by_weekday: Dict[int, List[ShiftTemplate]] = defaultdict(list)
        for template in templates:
            if template.is_deleted:
                continue
            self._by_weekday[template.day_of_week].append(template)

        self._special_by_date: Dict[date, SpecialDate] = {}
        for special in special_dates:
            if special.is_deleted:
                continue
            active = [t for t in special.templates if not t.is_deleted]
            if active:
                self._special_by_date[special.date] = special

    def is_special(self, target_date: date) -> bool:
        return target_date in self._special_by_date

    def special_date_name(self, target_date: date) -> Optional[str]:
        special = self._special_by_date.get(target_date)
        return special.name if special else None

    def lines_for(self, target_date: date) -> List[DemandLine]:
        special = self._special_by_date.get(target_date)
        if special is not None:
            lines = [
                _line_from(t, target_date, SOURCE_SPECIAL, special.name)
                for t in special.templates
                if not t.is_deleted
            ]
        else:
            lines = [
                _line_from(t, target_date, SOURCE_WEEKLY)
                for t in self._by_weekday.get(target_date.weekday(), [])
            ]
        return sorted(lines, key=_line_order)

    def resolve(self, start: date, end: date) -> Dict[date, List[DemandLine]]:
        """date -> demand lines for every date in [start, end]."""
        return {d: self.lines_for(d) for d in iter_dates(start, end)}


def role_demand_by_date(demand_by_date: Dict[date, List[DemandLine]]) -> Dict[date, Dict[int, int]]:
    """date -> {work_role_id: total required headcount}."""
    result: Dict[date, Dict[int, int]] = {}
    for target_date, lines in demand_by_date.items():
        per_role: Dict[int, int] = defaultdict(int)
        for line in lines:
            per_role[line.work_role_id] += line.required_count
        result[target_date] = dict(per_role)
    return result
