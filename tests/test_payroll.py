from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.models.employee import EmployeeStatus
from app.schemas.payroll import SalaryStructureCreate
from app.services.payroll_service import PayrollService


STRUCTURE = SalaryStructureCreate(
    basic=Decimal("30000"),
    hra=Decimal("12000"),
    conveyance=Decimal("1600"),
    medical=Decimal("1250"),
    special_allowance=Decimal("0"),
    pf_employee=Decimal("1800"),
    pf_employer=Decimal("1800"),
    esi_employee=Decimal("0"),
    pt=Decimal("200"),
)


async def test_monthly_salary_breakdown(db_session, make_employee):
    employee = await make_employee()
    service = PayrollService(db_session)
    await service.upsert_salary_structure(employee.id, STRUCTURE)

    salary = await service.calculate_monthly_salary(employee.id, 3, 2026)
    assert salary["gross"] == Decimal("44850.00")
    assert salary["deductions"] == Decimal("2000.00")
    assert salary["net"] == Decimal("42850.00")
    assert salary["breakdown"]["pf_employee"] == Decimal("1800.00")


async def test_salary_without_structure_is_not_found(db_session, make_employee):
    employee = await make_employee()
    with pytest.raises(HTTPException) as exc:
        await PayrollService(db_session).calculate_monthly_salary(employee.id, 3, 2026)
    assert exc.value.status_code == 404


async def test_new_structure_replaces_active_one(db_session, make_employee):
    employee = await make_employee()
    service = PayrollService(db_session)
    await service.upsert_salary_structure(employee.id, STRUCTURE)
    raised = STRUCTURE.model_copy(update={"basic": Decimal("33000")})
    await service.upsert_salary_structure(employee.id, raised)

    active = await service.get_active_structure(employee.id)
    assert Decimal(str(active.basic)) == Decimal("33000")
    salary = await service.calculate_monthly_salary(employee.id, 3, 2026)
    assert salary["gross"] == Decimal("47850.00")


async def test_process_payroll_skips_employees_without_structure(db_session, make_employee, company):
    service = PayrollService(db_session)
    first = await make_employee()
    second = await make_employee()
    await make_employee()
    await make_employee(status=EmployeeStatus.TERMINATED.value)
    await service.upsert_salary_structure(first.id, STRUCTURE)
    await service.upsert_salary_structure(second.id, STRUCTURE)

    run = await service.process_payroll(company.id, 3, 2026)

    assert run["status"] == "processed"
    assert run["total_payout"] == Decimal("85700.00")
    assert run["stats"]["headCount"] == 2
    assert run["stats"]["skippedCount"] == 1
    assert len(run["results"]) == 3
    skipped = [r for r in run["results"] if r["status"] == "skipped"]
    assert skipped[0]["reason"] == "No active salary structure"


async def test_reprocessing_updates_the_same_run(db_session, make_employee, company):
    service = PayrollService(db_session)
    employee = await make_employee()
    await service.upsert_salary_structure(employee.id, STRUCTURE)

    first = await service.process_payroll(company.id, 3, 2026)
    await service.upsert_salary_structure(employee.id, STRUCTURE.model_copy(update={"basic": Decimal("31000")}))
    second = await service.process_payroll(company.id, 3, 2026)

    assert second["id"] == first["id"]
    assert second["total_payout"] == Decimal("43850.00")
    assert len(await service.get_payroll_history(company.id)) == 1


async def test_paid_run_is_final(db_session, make_employee, company):
    service = PayrollService(db_session)
    employee = await make_employee()
    await service.upsert_salary_structure(employee.id, STRUCTURE)
    run = await service.process_payroll(company.id, 3, 2026)

    paid = await service.mark_paid(run["id"])
    assert paid.status == "paid"
    assert paid.paid_at is not None

    with pytest.raises(HTTPException) as exc:
        await service.process_payroll(company.id, 3, 2026)
    assert exc.value.status_code == 409

    with pytest.raises(HTTPException) as exc:
        await service.mark_paid(run["id"])
    assert exc.value.status_code == 400


async def test_payroll_endpoints(client, make_employee, company):
    employee = await make_employee()

    response = await client.put(
        f"/api/v1/payroll/salary-structure/{employee.id}",
        json={"basic": "30000", "hra": "12000", "conveyance": "1600", "medical": "1250", "pf_employee": "1800", "pt": "200"},
    )
    assert response.status_code == 200
    assert response.json()["company_id"] == str(company.id)

    response = await client.get(f"/api/v1/payroll/calculate/{employee.id}", params={"month": 3, "year": 2026})
    assert response.status_code == 200
    assert Decimal(str(response.json()["net"])) == Decimal("42850")

    for month in (1, 2):
        response = await client.post("/api/v1/payroll/process", json={
            "company_id": str(company.id), "month": month, "year": 2026,
        })
        assert response.status_code == 200
    assert response.json()["results"][0]["status"] == "processed"

    response = await client.get(f"/api/v1/payroll/history/{company.id}")
    assert [r["month"] for r in response.json()] == [2, 1]


async def test_payroll_rejects_invalid_month(client, company):
    response = await client.post("/api/v1/payroll/process", json={
        "company_id": str(company.id), "month": 13, "year": 2026,
    })
    assert response.status_code == 422


async def test_process_payroll_for_unknown_company(db_session):
    import uuid

    with pytest.raises(HTTPException) as exc:
        await PayrollService(db_session).process_payroll(uuid.uuid4(), 3, 2026)
    assert exc.value.status_code == 404
