from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import BEFORE_JUNE_2026
from grimorio.database import get_db
from grimorio.models import AuditAction, AuditLog, ContractType, ScheduleConfiguration
from grimorio.routers.scheduling import get_today
from main import app


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: BEFORE_JUNE_2026
    yield TestClient(app)
    app.dependency_overrides.clear()


def _generate(client, branch_id, year=2026, month=6):
    return client.post("/api/scheduling/shifts/generate", json={
        "branch_id": branch_id, "year": year, "month": month
    })


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200


def test_generate_month(client, cashier_branch):
    builder = cashier_branch[0]

    response = _generate(client, builder.id)

    assert response.status_code == 200
    body = response.json()
    assert body["total_shifts_generated"] == 24
    assert body["total_shifts_not_covered"] == 6
    assert body["assignments"][0]["date"] == "2026-06-02"
    assert body["assignments"][0]["start_time"] == "09:00:00"
    assert body["assignments"][0]["work_area_color"] == "#FF9900"
    kinds = {w["kind"] for w in body["warnings"]}
    assert kinds == {"capacity", "coverage"}


def test_generate_rejects_invalid_month(client, cashier_branch):
    response = _generate(client, cashier_branch[0].id, month=13)

    assert response.status_code == 400
    assert response.json()["detail"]["error_code"] == "INVALID_MONTH"


def test_out_of_range_year_is_rejected(client, cashier_branch):
    builder = cashier_branch[0]

    generated = _generate(client, builder.id, year=10000, month=1)
    listed = client.get("/api/scheduling/shifts", params={"branch_id": builder.id, "year": 10000, "month": 1})

    assert generated.status_code == 400
    assert generated.json()["detail"]["error_code"] == "INVALID_YEAR"
    assert listed.status_code == 422


def test_generate_unknown_branch(client):
    response = _generate(client, 4242)

    assert response.status_code == 400
    assert response.json()["detail"] == {"message": "Branch not found.", "error_code": "BRANCH_NOT_FOUND"}


def test_previews(client, cashier_branch):
    builder = cashier_branch[0]
    params = {"branch_id": builder.id, "year": 2026, "month": 6}

    capacity = client.get("/api/scheduling/shifts/capacity-check", params=params)
    plan = client.get("/api/scheduling/shifts/planned-off-days", params=params)

    assert capacity.status_code == 200
    assert len(capacity.json()["warnings"]) == 2
    assert plan.json()["plans"][0]["planned_dates"] == [
        "2026-06-01", "2026-06-08", "2026-06-09", "2026-06-15", "2026-06-22", "2026-06-23"
    ]
    assert client.get("/api/scheduling/shifts", params=params).json() == []


def test_listing_queries(client, cashier_branch, builder):
    _, front, cashier, ana = cashier_branch
    bea = builder.employee("Bea", [cashier], contract_type=ContractType.PART_TIME, weekly_max_hours=10,
                           free_days_per_month=0)
    builder.commit()
    _generate(client, builder.id)

    monthly = client.get("/api/scheduling/shifts", params={"branch_id": builder.id, "year": 2026, "month": 6})
    only_ana = client.get("/api/scheduling/shifts", params={
        "branch_id": builder.id, "year": 2026, "month": 6, "employee_id": ana.id
    })
    by_date = client.get("/api/scheduling/shifts/by-date", params={
        "branch_id": builder.id, "target_date": "2026-06-01"
    })
    free = client.get("/api/scheduling/shifts/free-employees", params={
        "branch_id": builder.id, "target_date": "2026-06-01"
    })

    assert {s["employee_id"] for s in monthly.json()} == {ana.id, bea.id}
    assert len(only_ana.json()) < len(monthly.json())
    assert {s["employee_id"] for s in only_ana.json()} == {ana.id}
    # Ana rests on the 1st, Bea covers it
    assert [s["employee_name"] for s in by_date.json()] == ["Bea"]
    assert [e["name"] for e in free.json()] == ["Ana"]


def test_schedulable_employees_lists_roles_primary_first(client, builder):
    front = builder.area("Front", display_order=1)
    kitchen = builder.area("Kitchen", display_order=2)
    cashier = builder.role(front, "Cashier")
    cook = builder.role(kitchen, "Line cook")
    builder.employee("Dani", [(cook, False, 1), (cashier, True, 2)])
    builder.employee("Ghost", [cashier], is_active=False)
    builder.commit()

    response = client.get("/api/scheduling/employees/eligible", params={"branch_id": builder.id})

    body = response.json()
    assert [e["name"] for e in body] == ["Dani"]
    assert [r["work_role_name"] for r in body[0]["work_roles"]] == ["Cashier", "Line cook"]
    assert body[0]["contract_type"] == "full_time"


def test_manual_shift_approve_and_delete(client, session_factory, cashier_branch):
    builder, front, cashier, ana = cashier_branch
    payload = {
        "branch_id": builder.id,
        "employee_id": ana.id,
        "date": "2026-06-03",
        "start_time": "08:00:00",
        "end_time": "17:00:00",
        "lunch_minutes": 60,
        "work_area_id": front.id,
        "work_role_id": cashier.id,
    }

    created = client.post("/api/scheduling/shifts", json=payload)
    duplicate = client.post("/api/scheduling/shifts", json=payload)

    assert created.status_code == 200
    assert created.json()["worked_hours"] == 8.0
    assert duplicate.status_code == 400

    shift_id = created.json()["id"]
    approved = client.post(f"/api/scheduling/shifts/{shift_id}/approve", json={"approved_by": 7})
    assert approved.status_code == 200
    assert approved.json()["is_approved"] is True
    assert approved.json()["approved_by"] == 7

    assert client.delete(f"/api/scheduling/shifts/{shift_id}").status_code == 200
    assert client.delete(f"/api/scheduling/shifts/{shift_id}").status_code == 404
    assert client.post(f"/api/scheduling/shifts/{shift_id}/approve", json={"approved_by": 7}).status_code == 404

    session = session_factory()
    try:
        actions = [log.action for log in session.query(AuditLog).order_by(AuditLog.id).all()]
    finally:
        session.close()
    assert actions == [AuditAction.SHIFT_APPROVED, AuditAction.SHIFT_DELETED]


def test_manual_shift_rejects_inverted_window(client, cashier_branch):
    builder, front, cashier, ana = cashier_branch

    response = client.post("/api/scheduling/shifts", json={
        "branch_id": builder.id,
        "employee_id": ana.id,
        "date": "2026-06-03",
        "start_time": "17:00:00",
        "end_time": "08:00:00",
        "work_area_id": front.id,
        "work_role_id": cashier.id,
    })

    assert response.status_code == 422


def test_configuration_defaults_and_saved_values(client, db, builder):
    builder.commit()
    defaults = client.get("/api/scheduling/configuration", params={"branch_id": builder.id}).json()
    assert defaults == {"branch_id": builder.id, "hours_per_day": 8.0, "free_day_color": "#E8E8E8"}

    db.add(ScheduleConfiguration(branch_id=builder.id, hours_per_day=Decimal("7.5"), free_day_color="#CCCCCC"))
    db.commit()

    saved = client.get("/api/scheduling/configuration", params={"branch_id": builder.id}).json()
    assert saved["hours_per_day"] == 7.5
    assert saved["free_day_color"] == "#CCCCCC"


def test_save_configuration_creates_then_updates(client, builder):
    builder.commit()
    url = "/api/scheduling/configuration"

    created = client.put(url, json={"branch_id": builder.id, "hours_per_day": 6, "free_day_color": "#abcdef"})
    updated = client.put(url, json={"branch_id": builder.id, "hours_per_day": 7.5})

    assert created.json() == {"branch_id": builder.id, "hours_per_day": 6.0, "free_day_color": "#ABCDEF"}
    assert updated.json()["hours_per_day"] == 7.5
    assert client.get(url, params={"branch_id": builder.id}).json() == updated.json()
    assert client.put(url, json={"branch_id": 4242}).status_code == 404
    assert client.put(url, json={"branch_id": builder.id, "free_day_color": "grey"}).status_code == 422
