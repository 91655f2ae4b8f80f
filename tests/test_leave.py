from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.models.leave import LeaveType, LeaveStatus
from app.schemas.leave import LeaveApplicationData
from app.services.leave_service import LeaveService


@pytest.fixture
async def casual_leave(db_session, company) -> LeaveType:
    leave_type = LeaveType(company_id=company.id, name="Casual Leave", code="CL", annual_quota=12)
    db_session.add(leave_type)
    await db_session.commit()
    return leave_type


async def test_apply_derives_inclusive_days(db_session, make_employee, casual_leave):
    employee = await make_employee()
    leave = await LeaveService(db_session).apply_leave(
        employee.id,
        casual_leave.id,
        LeaveApplicationData(start_date=date(2026, 3, 9), end_date=date(2026, 3, 11), reason="Family function"),
    )
    assert leave.status == "pending"
    assert Decimal(str(leave.days)) == Decimal("3")


async def test_apply_keeps_explicit_half_day(db_session, make_employee, casual_leave):
    employee = await make_employee()
    leave = await LeaveService(db_session).apply_leave(
        employee.id,
        casual_leave.id,
        LeaveApplicationData(start_date=date(2026, 3, 9), end_date=date(2026, 3, 9), days=Decimal("0.5")),
    )
    assert Decimal(str(leave.days)) == Decimal("0.5")


async def test_apply_rejects_reversed_dates(db_session, make_employee, casual_leave):
    employee = await make_employee()
    with pytest.raises(HTTPException) as exc:
        await LeaveService(db_session).apply_leave(
            employee.id,
            casual_leave.id,
            LeaveApplicationData(start_date=date(2026, 3, 11), end_date=date(2026, 3, 9)),
        )
    assert exc.value.status_code == 400


async def test_status_can_be_overwritten_from_any_state(db_session, make_employee, casual_leave):
    employee = await make_employee()
    manager = await make_employee()
    service = LeaveService(db_session)
    leave = await service.apply_leave(
        employee.id,
        casual_leave.id,
        LeaveApplicationData(start_date=date(2026, 3, 9), end_date=date(2026, 3, 9)),
    )

    leave = await service.update_status(leave.id, LeaveStatus.REJECTED, manager.id)
    assert leave.status == "rejected"

    leave = await service.update_status(leave.id, LeaveStatus.APPROVED, manager.id)
    assert leave.status == "approved"
    assert leave.approved_by_id == manager.id
    assert leave.approved_at is not None


async def test_leave_endpoints(client, make_employee, casual_leave):
    employee = await make_employee()

    response = await client.post("/api/v1/leave/apply", json={
        "employee_id": str(employee.id),
        "leave_type_id": str(casual_leave.id),
        "data": {"start_date": "2026-03-09", "end_date": "2026-03-10", "reason": "Travel"},
    })
    assert response.status_code == 201
    leave_id = response.json()["id"]

    response = await client.patch(f"/api/v1/leave/status/{leave_id}", json={"status": "approved"})
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    response = await client.get(f"/api/v1/leave/employee/{employee.id}")
    assert response.status_code == 200
    leaves = response.json()
    assert len(leaves) == 1
    assert leaves[0]["leave_type"]["code"] == "CL"
    assert Decimal(str(leaves[0]["days"])) == Decimal("2")


async def test_unknown_status_is_rejected(client, make_employee, casual_leave):
    response = await client.patch(
        "/api/v1/leave/status/00000000-0000-0000-0000-000000000001",
        json={"status": "archived"},
    )
    assert response.status_code == 422


async def test_leave_types_by_company(client, company, casual_leave):
    response = await client.post("/api/v1/leave/types", json={
        "company_id": str(company.id), "name": "Sick Leave", "code": "SL", "annual_quota": 8,
    })
    assert response.status_code == 201

    response = await client.get("/api/v1/leave/types", params={"company_id": str(company.id)})
    assert sorted(t["code"] for t in response.json()) == ["CL", "SL"]


async def test_status_change_with_unknown_approver(client, make_employee, casual_leave):
    employee = await make_employee()
    response = await client.post("/api/v1/leave/apply", json={
        "employee_id": str(employee.id),
        "leave_type_id": str(casual_leave.id),
        "data": {"start_date": "2026-03-09", "end_date": "2026-03-09"},
    })
    leave_id = response.json()["id"]

    response = await client.patch(f"/api/v1/leave/status/{leave_id}", json={
        "status": "approved", "approver_id": "00000000-0000-0000-0000-000000000002",
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "Approver not found"
