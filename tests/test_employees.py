import pytest

from app.models.employee import EmployeeStatus, can_transition


@pytest.mark.parametrize("current,target,allowed", [
    ("active", "on_notice", True),
    ("on_notice", "exited", True),
    ("exited", "active", False),
    ("exited", "terminated", True),
    ("terminated", "active", False),
    ("terminated", "terminated", False),
    ("suspended", "suspended", True),
])
def test_status_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


def _payload(company, **overrides):
    payload = {
        "company_id": str(company.id),
        "employee_code": "EMP-0100",
        "first_name": "Ravi",
        "last_name": "Kumar",
        "personal_email": "ravi.kumar@pepl.co.in",
        "phone": "+919812345678",
        "joining_date": "2025-07-01",
    }
    payload.update(overrides)
    return payload


async def test_onboard_employee(client, company):
    response = await client.post("/api/v1/employees", json=_payload(company))
    assert response.status_code == 201
    body = response.json()
    assert body["full_name"] == "Ravi Kumar"
    assert body["status"] == EmployeeStatus.ACTIVE.value
    assert body["group_id"] == str(company.group_id)


async def test_duplicate_employee_conflicts(client, company):
    await client.post("/api/v1/employees", json=_payload(company))
    response = await client.post(
        "/api/v1/employees",
        json=_payload(company, employee_code="EMP-0101", phone=None),
    )
    assert response.status_code == 409


async def test_list_filters_by_status(client, company, make_employee):
    await make_employee()
    await make_employee(status="on_notice")

    response = await client.get("/api/v1/employees", params={"company_id": str(company.id), "status": "on_notice"})
    assert response.status_code == 200
    assert [e["status"] for e in response.json()] == ["on_notice"]


async def test_invalid_transition_is_rejected(client, make_employee):
    employee = await make_employee(status="exited")

    response = await client.patch(f"/api/v1/employees/{employee.id}", json={"status": "active"})
    assert response.status_code == 400


async def test_terminate_is_soft_and_final(client, make_employee):
    employee = await make_employee()

    response = await client.delete(f"/api/v1/employees/{employee.id}")
    assert response.status_code == 200
    assert response.json()["status"] == "terminated"

    response = await client.get(f"/api/v1/employees/{employee.id}")
    assert response.status_code == 200

    response = await client.delete(f"/api/v1/employees/{employee.id}")
    assert response.status_code == 400

    response = await client.patch(f"/api/v1/employees/{employee.id}", json={"first_name": "Changed"})
    assert response.status_code == 400


async def test_update_to_taken_contact_conflicts(client, make_employee):
    first = await make_employee(work_email="ravi@pepl.co.in", phone="+919800000001")
    second = await make_employee()
    work_email, phone = first.work_email, first.phone

    response = await client.patch(f"/api/v1/employees/{second.id}", json={"work_email": work_email})
    assert response.status_code == 409

    response = await client.patch(f"/api/v1/employees/{second.id}", json={"phone": phone})
    assert response.status_code == 409

    # Re-sending an employee's own contact details is not a conflict
    response = await client.patch(f"/api/v1/employees/{first.id}", json={"work_email": work_email})
    assert response.status_code == 200


async def test_update_with_unknown_manager_is_not_found(client, make_employee):
    employee = await make_employee()
    response = await client.patch(
        f"/api/v1/employees/{employee.id}",
        json={"reporting_manager_id": "00000000-0000-0000-0000-000000000009"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Reporting manager not found"


async def test_unknown_employee(client, company):
    response = await client.get("/api/v1/employees/00000000-0000-0000-0000-000000000009")
    assert response.status_code == 404


async def test_organization_tree(client):
    response = await client.post("/api/v1/organization/groups", json={"name": "PEPL Group"})
    assert response.status_code == 201
    group_id = response.json()["id"]

    response = await client.post("/api/v1/organization/companies", json={
        "group_id": group_id,
        "name": "PEPL Retail",
        "legal_name": "PEPL Retail Private Limited",
        "code": "pepl-r",
        "registered_address": "Sector 62, Noida",
    })
    assert response.status_code == 201
    company = response.json()
    assert company["code"] == "PEPL-R"

    response = await client.post("/api/v1/organization/departments", json={
        "company_id": company["id"], "name": "Sales", "code": "SALES",
    })
    sales = response.json()
    response = await client.post("/api/v1/organization/departments", json={
        "company_id": company["id"], "name": "Field Sales", "code": "FIELD", "parent_id": sales["id"],
    })
    assert response.status_code == 201
    assert response.json()["level"] == 2
    assert response.json()["path"] == "SALES/FIELD"

    response = await client.post("/api/v1/organization/roles", json={
        "company_id": company["id"], "title": "Sales Executive", "is_sales_role": True,
    })
    assert response.status_code == 201

    response = await client.get("/api/v1/organization/roles", params={"company_id": company["id"]})
    assert [r["title"] for r in response.json()] == ["Sales Executive"]


async def test_department_for_unknown_company(client):
    response = await client.post("/api/v1/organization/departments", json={
        "company_id": "00000000-0000-0000-0000-000000000003", "name": "Sales",
    })
    assert response.status_code == 404


async def test_duplicate_company_code_conflicts(client, company):
    response = await client.post("/api/v1/organization/companies", json={
        "group_id": str(company.group_id),
        "name": "Copy",
        "legal_name": "Copy Ltd",
        "code": "pepl",
        "registered_address": "Somewhere",
    })
    assert response.status_code == 409
