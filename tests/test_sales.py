from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.models.sales import IncentiveStatus
from app.schemas.sales import SalesRecordData
from app.services.sales_service import SalesService, achievement_percentage, incentive_rate
from tests.conftest import new_id


def test_achievement_percentage():
    assert achievement_percentage(Decimal("120000"), Decimal("100000")) == Decimal("120.00")
    assert achievement_percentage(Decimal("1"), Decimal("3")) == Decimal("33.33")


def test_incentive_rate_tiers():
    assert incentive_rate(Decimal("100000"), Decimal("100000")) == Decimal("0.05")
    assert incentive_rate(Decimal("99999"), Decimal("100000")) == Decimal("0.02")
    # 99.996% displays as 100.00 but is below target
    assert incentive_rate(Decimal("99996"), Decimal("100000")) == Decimal("0.02")


async def _record(service, employee, achieved, target="100000", day=date(2026, 3, 10)):
    return await service.add_sales_record(
        employee.id,
        employee.company_id,
        SalesRecordData(sale_date=day, target_amount=Decimal(target), achieved_amount=Decimal(achieved)),
    )


async def test_target_met_earns_five_percent(db_session, make_employee):
    employee = await make_employee()
    service = SalesService(db_session)
    record = await _record(service, employee, "120000")
    assert Decimal(str(record.achievement_percentage)) == Decimal("120.00")

    incentive = await service.calculate_incentive(employee.id, 3, 2026)
    assert Decimal(str(incentive.total_incentive)) == Decimal("6000.00")
    assert incentive.status == "pending"
    assert incentive.breakdown["rate"] == 0.05


async def test_target_missed_earns_two_percent(db_session, make_employee):
    employee = await make_employee()
    service = SalesService(db_session)
    await _record(service, employee, "80000")

    incentive = await service.calculate_incentive(employee.id, 3, 2026)
    assert Decimal(str(incentive.total_incentive)) == Decimal("1600.00")
    assert incentive.breakdown["percentage"] == 80.0


async def test_incentive_only_counts_the_requested_month(db_session, make_employee):
    employee = await make_employee()
    service = SalesService(db_session)
    await _record(service, employee, "50000", target="50000", day=date(2026, 3, 5))
    await _record(service, employee, "70000", target="50000", day=date(2026, 3, 25))
    await _record(service, employee, "900000", target="50000", day=date(2026, 4, 1))

    incentive = await service.calculate_incentive(employee.id, 3, 2026)
    # 120000 of 100000 in March
    assert incentive.breakdown["records"] == 2
    assert Decimal(str(incentive.total_incentive)) == Decimal("6000.00")


async def test_recalculation_updates_existing_incentive(db_session, make_employee):
    employee = await make_employee()
    service = SalesService(db_session)
    await _record(service, employee, "80000")
    first = await service.calculate_incentive(employee.id, 3, 2026)

    await _record(service, employee, "40000", target="20000", day=date(2026, 3, 20))
    second = await service.calculate_incentive(employee.id, 3, 2026)

    assert second.id == first.id
    # 120000 of 120000
    assert Decimal(str(second.total_incentive)) == Decimal("6000.00")


async def test_month_without_sales_is_not_found(db_session, make_employee):
    employee = await make_employee()
    with pytest.raises(HTTPException) as exc:
        await SalesService(db_session).calculate_incentive(employee.id, 3, 2026)
    assert exc.value.status_code == 404


async def test_sales_endpoints(client, make_employee):
    employee = await make_employee()

    response = await client.post("/api/v1/sales/record", json={
        "employee_id": str(employee.id),
        "company_id": str(employee.company_id),
        "data": {"sale_date": "2026-03-10", "target_amount": "100000", "achieved_amount": "120000",
                 "details": {"region": "North"}},
    })
    assert response.status_code == 201
    assert Decimal(str(response.json()["achievement_percentage"])) == Decimal("120")

    response = await client.get(f"/api/v1/sales/employee/{employee.id}")
    assert len(response.json()) == 1

    response = await client.post("/api/v1/sales/calculate-incentive", json={
        "employee_id": str(employee.id), "month": 3, "year": 2026,
    })
    assert response.status_code == 200
    assert Decimal(str(response.json()["total_incentive"])) == Decimal("6000")


async def test_zero_target_is_rejected(client, make_employee):
    employee = await make_employee()
    response = await client.post("/api/v1/sales/record", json={
        "employee_id": str(employee.id),
        "company_id": str(employee.company_id),
        "data": {"target_amount": "0", "achieved_amount": "10"},
    })
    assert response.status_code == 422


async def test_just_below_target_earns_two_percent(db_session, make_employee):
    employee = await make_employee()
    service = SalesService(db_session)
    await _record(service, employee, "99996")

    incentive = await service.calculate_incentive(employee.id, 3, 2026)
    assert Decimal(str(incentive.total_incentive)) == Decimal("1999.92")
    assert incentive.breakdown["percentage"] == 100.0
    assert incentive.breakdown["rate"] == 0.02


@pytest.mark.parametrize("settled", [IncentiveStatus.APPROVED, IncentiveStatus.PAID])
async def test_settled_incentive_is_not_recalculated(db_session, make_employee, settled):
    employee = await make_employee()
    service = SalesService(db_session)
    await _record(service, employee, "80000")
    incentive = await service.calculate_incentive(employee.id, 3, 2026)
    incentive.status = settled.value
    await db_session.flush()

    await _record(service, employee, "40000", day=date(2026, 3, 20))
    with pytest.raises(HTTPException) as exc:
        await service.calculate_incentive(employee.id, 3, 2026)
    assert exc.value.status_code == 409

    await db_session.refresh(incentive)
    assert incentive.status == settled.value
    assert Decimal(str(incentive.total_incentive)) == Decimal("1600.00")


async def test_sales_record_for_unknown_company_is_not_found(client, make_employee):
    employee = await make_employee()
    response = await client.post("/api/v1/sales/record", json={
        "employee_id": str(employee.id),
        "company_id": str(new_id()),
        "data": {"sale_date": "2026-03-10", "target_amount": "100000", "achieved_amount": "1000"},
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "Company not found"
