from datetime import date, time
from decimal import Decimal

from grimorio.models import ContractType
from grimorio.schemas.scheduling import WarningKind
from grimorio.services.capacity_auditor import CapacityAuditor
from grimorio.services.demand_resolver import SOURCE_WEEKLY, DemandLine
from grimorio.services.generation_state import GenerationState
from grimorio.services.month_calendar import iter_dates
from grimorio.services.post_audit import PostAudit
from grimorio.services.roster import RoleHolding, Roster, RosterEntry

CASHIER = 1
BARTENDER = 2
JUNE_START = date(2026, 6, 1)
JUNE_END = date(2026, 6, 30)


def _entry(employee_id, contract_type=ContractType.FULL_TIME, free_days=6, weekly_max=40, roles=(CASHIER,)):
    entry = RosterEntry(
        employee_id=employee_id,
        name=f"Employee {employee_id}",
        contract_type=contract_type,
        weekly_max_hours=Decimal(weekly_max),
        free_days_per_month=free_days,
    )
    for role_id in roles:
        entry.roles[role_id] = RoleHolding(role_id, True, 1)
    return entry


def _line(on, role_id, role_name, hours, required_count=1):
    return DemandLine(
        date=on,
        source=SOURCE_WEEKLY,
        source_id=role_id,
        work_area_id=1,
        work_area_name="Front",
        work_area_color="#FF9900",
        work_area_order=0,
        work_role_id=role_id,
        work_role_name=role_name,
        start_time=time(9, 0),
        end_time=time(9 + int(hours), 0),
        break_minutes=None,
        lunch_minutes=None,
        required_count=required_count,
        worked_hours=Decimal(hours),
    )


def _daily_demand(start, end, role_id=CASHIER, role_name="Cashier", hours=6, required_count=1):
    return {d: [_line(d, role_id, role_name, hours, required_count)] for d in iter_dates(start, end)}


def _auditor(roster, state=None, unavailable=None, window_start=JUNE_START):
    return CapacityAuditor(
        roster=roster,
        state=state or GenerationState(),
        unavailable_by_employee=unavailable or {},
        days_in_month=30,
        window_start=window_start,
        window_end=JUNE_END,
    )


def test_role_without_holders_is_reported():
    roster = Roster({1: _entry(1)})
    demand = _daily_demand(JUNE_START, JUNE_END, role_id=BARTENDER, role_name="Bartender")

    warnings = _auditor(roster).audit(demand)

    assert len(warnings) == 1
    assert warnings[0].kind == WarningKind.CAPACITY
    assert warnings[0].work_role_name == "Bartender"
    assert warnings[0].assigned_count == 0
    assert warnings[0].required_count == 30


def test_single_cashier_day_shortfall_and_hour_surplus():
    roster = Roster({1: _entry(1)})

    warnings = _auditor(roster).audit(_daily_demand(JUNE_START, JUNE_END))

    # 24 quota days vs 30 required; 24 * 40 / 5 = 192h vs 180h required
    reasons = [w.reason for w in warnings]
    assert len(warnings) == 2
    assert reasons[0].startswith("Day capacity shortfall: 24 available vs 30 required")
    assert reasons[1].startswith("Hour capacity surplus: 192.00h available vs 180.00h required")


def test_capacity_counts_exceptions_and_days_already_worked():
    state = GenerationState()
    for day in range(1, 21):
        state.track(1, date(2026, 6, day), Decimal("6.00"))
    part_timer = _entry(2, contract_type=ContractType.PART_TIME, weekly_max=20)
    roster = Roster({1: _entry(1), 2: part_timer})
    auditor = _auditor(
        roster,
        state=state,
        unavailable={2: {date(2026, 6, 25), date(2026, 6, 26), date(2026, 5, 30)}},
        window_start=date(2026, 6, 21),
    )

    # full-time: 24 target - 20 worked = 4, window has 10 days
    assert auditor.capacity_days(roster.get(1)) == 4
    # part-time: 10 window days - 2 exceptions inside the window
    assert auditor.available_days(part_timer) == 8
    assert auditor.capacity_days(part_timer) == 8


def test_demand_outside_window_is_not_counted():
    roster = Roster({1: _entry(1)})
    auditor = _auditor(roster, window_start=date(2026, 6, 21))

    per_role = auditor.aggregate_demand(_daily_demand(JUNE_START, JUNE_END))

    assert per_role[CASHIER].required_days == 10
    assert per_role[CASHIER].required_hours == Decimal("60")


def test_post_audit_flags_quota_mismatch():
    state = GenerationState()
    for day in range(1, 23):
        state.track(1, date(2026, 6, day), Decimal("6.00"))
    roster = Roster({1: _entry(1), 2: _entry(2, contract_type=ContractType.PART_TIME)})

    warnings = PostAudit(roster, state, {1: set()}, days_in_month=30, month_end=JUNE_END).run()

    assert len(warnings) == 1
    assert warnings[0].kind == WarningKind.QUOTA
    assert warnings[0].employee_id == 1
    assert warnings[0].required_count == 24
    assert warnings[0].assigned_count == 22
    assert "short by 2 days" in warnings[0].reason


def test_post_audit_flags_worked_planned_off_days():
    state = GenerationState()
    worked = [d for d in iter_dates(JUNE_START, JUNE_END) if d.day not in (2, 8, 9, 15, 22, 23)]
    for d in worked:
        state.track(1, d, Decimal("6.00"))
    planned = {1: {date(2026, 6, 1), date(2026, 6, 8), date(2026, 6, 9), date(2026, 6, 15),
                   date(2026, 6, 22), date(2026, 6, 23)}}

    warnings = PostAudit(Roster({1: _entry(1)}), state, planned, days_in_month=30, month_end=JUNE_END).run()

    assert [w.kind for w in warnings] == [WarningKind.PLANNED_OFF_DAY]
    assert warnings[0].date == date(2026, 6, 1)
