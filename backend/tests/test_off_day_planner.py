from datetime import date

from grimorio.models import ContractType
from grimorio.services.month_calendar import iter_dates, month_bounds
from grimorio.services.off_day_planner import OffDayPlanner
from grimorio.services.roster import RoleHolding, Roster, RosterEntry

CASHIER = 1
COOK = 2


def _entry(employee_id, free_days, contract_type=ContractType.FULL_TIME, roles=(CASHIER,)):
    entry = RosterEntry(
        employee_id=employee_id,
        name=f"Employee {employee_id}",
        contract_type=contract_type,
        weekly_max_hours=40,
        free_days_per_month=free_days,
    )
    for priority, role_id in enumerate(roles, start=1):
        entry.roles[role_id] = RoleHolding(role_id, priority == 1, priority)
    return entry


def _flat_demand(year, month, per_day=1, role_id=CASHIER):
    first, last, _ = month_bounds(year, month)
    return {d: {role_id: per_day} for d in iter_dates(first, last)}


def _planner(demand, year, month):
    first, last, _ = month_bounds(year, month)
    return OffDayPlanner(demand, first, last)


def test_flat_demand_follows_one_two_one_two_rotation():
    # June 2026 starts on a Monday
    planner = _planner(_flat_demand(2026, 6), 2026, 6)

    planned = planner.plan_for(_entry(1, free_days=6))

    assert sorted(d.day for d in planned) == [1, 8, 9, 15, 22, 23]


def test_lowest_demand_weekdays_are_preferred():
    demand = _flat_demand(2026, 6, per_day=2)
    for d in demand:
        if d.weekday() in (2, 3):
            demand[d] = {CASHIER: 1}

    planned = _planner(demand, 2026, 6).plan_for(_entry(1, free_days=6))

    # single days land on Wednesdays, pairs on Wednesday+Thursday
    assert sorted(d.day for d in planned) == [3, 10, 11, 17, 24, 25]


def test_demand_of_roles_not_held_is_ignored():
    demand = _flat_demand(2026, 6)
    demand[date(2026, 6, 2)] = {CASHIER: 0, COOK: 5}

    planned = _planner(demand, 2026, 6).plan_for(_entry(1, free_days=1))

    assert planned == {date(2026, 6, 2)}


def test_weekends_are_never_planned():
    planned = _planner(_flat_demand(2026, 6), 2026, 6).plan_for(_entry(1, free_days=6))

    assert all(d.weekday() < 5 for d in planned)


def test_quota_caps_the_planned_count():
    planner = _planner(_flat_demand(2026, 6), 2026, 6)

    assert sorted(d.day for d in planner.plan_for(_entry(1, free_days=3))) == [1, 8, 9]
    assert sorted(d.day for d in planner.plan_for(_entry(2, free_days=4))) == [1, 8, 9, 15]
    assert planner.plan_for(_entry(3, free_days=0)) == set()


def test_week_without_weekdays_is_skipped():
    # September 2029 ends on Saturday 29 and Sunday 30
    planner = _planner(_flat_demand(2029, 9), 2029, 9)

    planned = planner.plan_for(_entry(1, free_days=8))

    assert len(planned) == 6
    assert all(d.day <= 28 for d in planned)


def test_last_short_week_uses_the_rotation_slot():
    planner = _planner(_flat_demand(2026, 6), 2026, 6)

    planned = planner.plan_for(_entry(1, free_days=8))

    # weeks give 1, 2, 1, 2 then the fifth week (29-30) gives 1
    assert sorted(d.day for d in planned) == [1, 8, 9, 15, 22, 23, 29]


def test_part_time_employees_get_no_plan():
    roster = Roster({
        1: _entry(1, free_days=6),
        2: _entry(2, free_days=6, contract_type=ContractType.PART_TIME),
    })

    plans = _planner(_flat_demand(2026, 6), 2026, 6).plan(roster)

    assert set(plans) == {1}
    assert len(plans[1]) == 6
