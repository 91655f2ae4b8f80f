import uuid

import httpx
import pytest

from app.clients.hrms_client import BackendSource, HRMSReader


class FakeTables:
    """Stands in for the cloud tables."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    async def select(self, table, filters=None, order_by=None):
        self.calls.append((table, filters, order_by))
        return list(self.rows.get(table, []))


def backend(handler) -> BackendSource:
    return BackendSource(base_url="http://hrms.test/api/v1", token="tok", transport=httpx.MockTransport(handler))


async def test_reads_from_api_when_available():
    employee_id = uuid.uuid4()
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["authorization"]
        seen["path"] = request.url.path
        return httpx.Response(200, json=[{"id": "s1", "achieved_amount": "1000"}])

    tables = FakeTables({})
    async with HRMSReader(primary=backend(handler), fallback=tables) as reader:
        rows = await reader.get_employee_sales(employee_id)

    assert rows == [{"id": "s1", "achieved_amount": "1000"}]
    assert seen == {"auth": "Bearer tok", "path": f"/api/v1/sales/employee/{employee_id}"}
    assert reader.degraded is False
    assert tables.calls == []


async def test_falls_back_to_tables_when_api_fails():
    tables = FakeTables({"employees": [{"id": "e1", "employee_code": "EMP-0001"}]})
    reader = HRMSReader(primary=backend(lambda request: httpx.Response(502)), fallback=tables)

    rows = await reader.list_employees()

    assert rows == [{"id": "e1", "employee_code": "EMP-0001"}]
    assert reader.degraded is True
    assert tables.calls == [("employees", None, None)]
    await reader.aclose()


async def test_falls_back_when_api_is_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    tables = FakeTables({"documents": [{"id": "d1"}]})
    reader = HRMSReader(primary=backend(handler), fallback=tables)

    assert await reader.get_employee_documents(uuid.uuid4()) == [{"id": "d1"}]
    assert reader.degraded is True
    await reader.aclose()


async def test_recovery_clears_degraded_flag():
    state = {"up": False}

    def handler(request):
        if not state["up"]:
            return httpx.Response(503)
        return httpx.Response(200, json=[])

    reader = HRMSReader(primary=backend(handler), fallback=FakeTables({}))
    await reader.get_employee_leaves(uuid.uuid4())
    assert reader.degraded is True

    state["up"] = True
    await reader.get_employee_leaves(uuid.uuid4())
    assert reader.degraded is False
    await reader.aclose()


async def test_attendance_fallback_keeps_requested_month():
    tables = FakeTables({"attendance": [
        {"id": "a1", "attendance_date": "2026-03-31"},
        {"id": "a2", "attendance_date": "2026-03-01"},
        {"id": "a3", "attendance_date": "2026-02-28"},
        {"id": "a4", "attendance_date": "2026-04-01"},
    ]})
    reader = HRMSReader(primary=backend(lambda request: httpx.Response(500)), fallback=tables)

    rows = await reader.get_monthly_attendance(uuid.uuid4(), month=3, year=2026)
    assert [r["id"] for r in rows] == ["a1", "a2"]
    await reader.aclose()


async def test_payroll_history_fallback_is_newest_first():
    tables = FakeTables({"payroll_runs": [
        {"id": "r1", "month": 12, "year": 2025},
        {"id": "r2", "month": 2, "year": 2026},
        {"id": "r3", "month": 1, "year": 2026},
    ]})
    reader = HRMSReader(primary=backend(lambda request: httpx.Response(500)), fallback=tables)

    rows = await reader.get_payroll_history(uuid.uuid4())
    assert [r["id"] for r in rows] == ["r2", "r3", "r1"]
    await reader.aclose()


async def test_writes_never_fall_back():
    tables = FakeTables({})
    reader = HRMSReader(primary=backend(lambda request: httpx.Response(500)), fallback=tables)

    with pytest.raises(httpx.HTTPStatusError):
        await reader.check_in(uuid.uuid4(), uuid.uuid4())
    assert tables.calls == []
    await reader.aclose()


async def test_apply_leave_posts_payload():
    captured = {}

    def handler(request):
        captured["path"] = request.url.path
        captured["body"] = request.read()
        return httpx.Response(201, json={"id": "l1", "status": "pending"})

    reader = HRMSReader(primary=backend(handler), fallback=FakeTables({}))
    employee_id, leave_type_id = uuid.uuid4(), uuid.uuid4()

    result = await reader.apply_leave(employee_id, leave_type_id, {"start_date": "2026-03-09", "end_date": "2026-03-09"})
    assert result["status"] == "pending"
    assert captured["path"] == "/api/v1/leave/apply"
    assert str(leave_type_id).encode() in captured["body"]
    await reader.aclose()
