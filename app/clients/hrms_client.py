"""
HRMS read client with a cloud fallback.

Reads go to the HRMS REST API first. When it is unreachable or errors, the
same read is re-run directly against the Supabase tables and the reader is
flagged `degraded` until the API answers again. Writes only ever go to the
API.
"""
import asyncio
import logging
import uuid
from datetime import date
from typing import Optional, Any, Awaitable, Callable, List

import httpx

from app.config import settings
from app.core.storage import StorageClient
from app.services.attendance_service import month_bounds


logger = logging.getLogger(__name__)


class BackendSource:
    """Primary path: the HRMS REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.AsyncClient(
            base_url=(base_url or settings.HRMS_API_URL).rstrip("/"),
            headers=headers,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def post(self, path: str, json: Optional[dict] = None) -> Any:
        response = await self.client.post(path, json=json)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()


class SupabaseSource:
    """Fallback path: direct table queries through PostgREST."""

    async def select(
        self,
        table: str,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
    ) -> List[dict]:
        # supabase-py is synchronous
        return await asyncio.to_thread(StorageClient.select_rows, table, filters, order_by)


class HRMSReader:
    """Repository over the API with a logged degraded mode."""

    def __init__(
        self,
        token: Optional[str] = None,
        primary: Optional[BackendSource] = None,
        fallback: Optional[SupabaseSource] = None,
    ):
        self.primary = primary or BackendSource(token=token)
        self.fallback = fallback or SupabaseSource()
        self.degraded = False

    async def __aenter__(self) -> "HRMSReader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.primary.aclose()

    async def _read(
        self,
        description: str,
        primary_call: Callable[[], Awaitable[Any]],
        fallback_call: Callable[[], Awaitable[Any]],
    ) -> Any:
        try:
            result = await primary_call()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Primary read failed for {description}, using cloud fallback: {e}")
            self.degraded = True
            return await fallback_call()

        if self.degraded:
            logger.info("HRMS API reachable again; leaving degraded mode")
        self.degraded = False
        return result

    # =========================================================================
    # READS
    # =========================================================================

    async def list_employees(self, company_id: Optional[uuid.UUID] = None) -> List[dict]:
        params = {"company_id": str(company_id)} if company_id else None
        filters = {"company_id": company_id} if company_id else None
        return await self._read(
            "employees",
            lambda: self.primary.get("/employees", params=params),
            lambda: self.fallback.select("employees", filters),
        )

    async def get_monthly_attendance(
        self,
        employee_id: uuid.UUID,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[dict]:
        today = date.today()
        month, year = month or today.month, year or today.year
        start, end = month_bounds(month, year)

        async def from_tables() -> List[dict]:
            rows = await self.fallback.select(
                "attendance", {"employee_id": employee_id}, order_by="attendance_date"
            )
            return [
                row for row in rows
                if start.isoformat() <= str(row.get("attendance_date", "")) <= end.isoformat()
            ]

        return await self._read(
            f"attendance of {employee_id}",
            lambda: self.primary.get(
                f"/attendance/monthly/{employee_id}", params={"month": month, "year": year}
            ),
            from_tables,
        )

    async def get_employee_leaves(self, employee_id: uuid.UUID) -> List[dict]:
        return await self._read(
            f"leaves of {employee_id}",
            lambda: self.primary.get(f"/leave/employee/{employee_id}"),
            lambda: self.fallback.select(
                "leave_applications", {"employee_id": employee_id}, order_by="created_at"
            ),
        )

    async def get_payroll_history(self, company_id: uuid.UUID) -> List[dict]:
        async def from_tables() -> List[dict]:
            rows = await self.fallback.select("payroll_runs", {"company_id": company_id})
            return sorted(rows, key=lambda r: (r.get("year", 0), r.get("month", 0)), reverse=True)

        return await self._read(
            f"payroll history of {company_id}",
            lambda: self.primary.get(f"/payroll/history/{company_id}"),
            from_tables,
        )

    async def get_employee_sales(self, employee_id: uuid.UUID) -> List[dict]:
        return await self._read(
            f"sales of {employee_id}",
            lambda: self.primary.get(f"/sales/employee/{employee_id}"),
            lambda: self.fallback.select(
                "sales_data", {"employee_id": employee_id}, order_by="sale_date"
            ),
        )

    async def get_employee_documents(self, employee_id: uuid.UUID) -> List[dict]:
        return await self._read(
            f"documents of {employee_id}",
            lambda: self.primary.get(f"/documents/employee/{employee_id}"),
            lambda: self.fallback.select(
                "documents", {"employee_id": employee_id}, order_by="created_at"
            ),
        )

    # =========================================================================
    # WRITES (primary only)
    # =========================================================================

    async def apply_leave(self, employee_id: uuid.UUID, leave_type_id: uuid.UUID, data: dict) -> dict:
        return await self.primary.post("/leave/apply", json={
            "employee_id": str(employee_id),
            "leave_type_id": str(leave_type_id),
            "data": data,
        })

    async def check_in(self, employee_id: uuid.UUID, company_id: uuid.UUID, location: Optional[dict] = None) -> dict:
        return await self.primary.post("/attendance/check-in", json={
            "employee_id": str(employee_id),
            "company_id": str(company_id),
            "location": location,
        })
