"""
Off-Day Planner

Pre-selects the rest days of every full-time employee before allocation.

Rotation per month-aligned week: 1, 2, 1, 2 rest days (repeating), only
Monday-Friday dates are candidates. Inside a week the days with the lowest
demand for the employee's roles win; when two days are needed a
consecutive pair is preferred.

The plan is advisory: the engine avoids these dates for full-time staff
and the post-audit reports any that ended up worked.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Set

from grimorio.services.month_calendar import iter_dates, iter_month_weeks
from grimorio.services.roster import Roster, RosterEntry

logger = logging.getLogger(__name__)

ROTATION_PATTERN = [1, 2, 1, 2]
FRIDAY = 4


class OffDayPlanner:

    def __init__(self, role_demand: Dict[date, Dict[int, int]], month_start: date, month_end: date):
        self.role_demand = role_demand
        self.month_start = month_start
        self.month_end = month_end

    def demand_score(self, entry: RosterEntry, target_date: date) -> int:
        per_role = self.role_demand.get(target_date, {})
        return sum(per_role.get(role_id, 0) for role_id in entry.role_ids)

    def plan_for(self, entry: RosterEntry) -> Set[date]:
        if not entry.is_full_time:
            return set()

        remaining = entry.free_days_per_month
        planned: Set[date] = set()

        for index, week_start, week_end in iter_month_weeks(self.month_start, self.month_end):
            if remaining <= 0:
                break

            candidates = [d for d in iter_dates(week_start, week_end) if d.weekday() <= FRIDAY]
            if not candidates:
                continue

            needed = min(ROTATION_PATTERN[index % len(ROTATION_PATTERN)], remaining)
            scores = {d: self.demand_score(entry, d) for d in candidates}

            if needed == 1:
                chosen = [min(candidates, key=lambda d: (scores[d], d))]
            else:
                chosen = self._pick_two(candidates, scores)

            planned.update(chosen)
            remaining -= len(chosen)

        return planned

    def _pick_two(self, candidates: List[date], scores: Dict[date, int]) -> List[date]:
        if len(candidates) == 1:
            return list(candidates)

        pairs = [
            (first, second)
            for first, second in zip(candidates, candidates[1:])
            if second - first == timedelta(days=1)
        ]
        if pairs:
            first, second = min(pairs, key=lambda p: (scores[p[0]] + scores[p[1]], p[0]))
            return [first, second]

        return sorted(candidates, key=lambda d: (scores[d], d))[:2]

    def plan(self, roster: Roster) -> Dict[int, Set[date]]:
        plans = {}
        for entry in roster.full_time():
            plans[entry.employee_id] = self.plan_for(entry)
            if len(plans[entry.employee_id]) < entry.free_days_per_month:
                logger.debug(
                    "Planned %s of %s rest days for employee %s",
                    len(plans[entry.employee_id]), entry.free_days_per_month, entry.employee_id
                )
        return plans
