"""
Payroll Service.

Monthly salary computation from the active salary structure and batch
payroll runs per company.
"""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Dict, Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.models.employee import Employee, EmployeeStatus
from app.models.organization import Company
from app.models.payroll import SalaryStructure, PayrollRun, PayrollStatus
from app.schemas.payroll import SalaryStructureCreate


logger = logging.getLogger(__name__)

EARNING_COMPONENTS = ("basic", "hra", "conveyance", "medical", "special_allowance")
DEDUCTION_COMPONENTS = ("pf_employee", "esi_employee", "pt")


def _money(value: Any) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def compute_salary(structure: SalaryStructure) -> Dict[str, Decimal]:
    """Gross, deductions and net for one month of a salary structure."""
    gross = sum((_money(getattr(structure, c)) for c in EARNING_COMPONENTS), Decimal("0.00"))
    deductions = sum((_money(getattr(structure, c)) for c in DEDUCTION_COMPONENTS), Decimal("0.00"))
    return {
        "gross": gross,
        "deductions": deductions,
        "net": gross - deductions,
    }


class PayrollService:
    """Service for salary structures and payroll processing."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # SALARY STRUCTURES
    # =========================================================================

    async def get_active_structure(self, employee_id: uuid.UUID) -> Optional[SalaryStructure]:
        result = await self.db.execute(
            select(SalaryStructure)
            .where(
                SalaryStructure.employee_id == employee_id,
                SalaryStructure.is_active.is_(True)
            )
            .order_by(SalaryStructure.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def upsert_salary_structure(
        self,
        employee_id: uuid.UUID,
        data: SalaryStructureCreate,
    ) -> SalaryStructure:
        """Activate a new salary structure, deactivating any previous one."""
        employee = await self.db.get(Employee, employee_id)
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )

        await self.db.execute(
            update(SalaryStructure)
            .where(
                SalaryStructure.employee_id == employee_id,
                SalaryStructure.is_active.is_(True)
            )
            .values(is_active=False, updated_at=datetime.now(timezone.utc))
        )

        values = data.model_dump()
        values["company_id"] = values.get("company_id") or employee.company_id
        structure = SalaryStructure(employee_id=employee_id, is_active=True, **values)
        self.db.add(structure)
        await self.db.flush()
        await self.db.refresh(structure)

        logger.info(f"Salary structure updated for employee {employee.employee_code}")
        return structure

    # =========================================================================
    # CALCULATION
    # =========================================================================

    async def calculate_monthly_salary(
        self,
        employee_id: uuid.UUID,
        month: int,
        year: int,
    ) -> Dict[str, Any]:
        """
        Salary breakdown for a month.

        The active structure is used whatever the month; there is no
        period-specific structure lookup.
        """
        structure = await self.get_active_structure(employee_id)
        if not structure:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Salary structure not found for employee {employee_id}"
            )
        employee = await self.db.get(Employee, employee_id)

        totals = compute_salary(structure)
        return {
            "employee_id": employee_id,
            "employee_name": employee.full_name if employee else "",
            "month": month,
            "year": year,
            **totals,
            "breakdown": {
                component: _money(getattr(structure, component))
                for component in EARNING_COMPONENTS + DEDUCTION_COMPONENTS
            },
        }

    # =========================================================================
    # PAYROLL RUNS
    # =========================================================================

    async def process_payroll(self, company_id: uuid.UUID, month: int, year: int) -> Dict[str, Any]:
        """
        Compute salaries for every non-terminated employee of a company and
        persist the run.

        One run exists per (company, month, year): re-processing recomputes it
        in place. A paid run is final.
        """
        if not await self.db.get(Company, company_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Company not found"
            )

        result = await self.db.execute(
            select(PayrollRun)
            .options(selectinload(PayrollRun.employees))
            .where(
                PayrollRun.company_id == company_id,
                PayrollRun.month == month,
                PayrollRun.year == year
            )
        )
        run = result.scalar_one_or_none()
        if run and run.status == PayrollStatus.PAID.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Payroll for {month}/{year} is already paid"
            )

        emp_result = await self.db.execute(
            select(Employee)
            .where(
                Employee.company_id == company_id,
                Employee.status != EmployeeStatus.TERMINATED.value
            )
            .order_by(Employee.employee_code)
        )
        employees = list(emp_result.scalars().all())

        results: List[Dict[str, Any]] = []
        processed: List[Employee] = []
        total_gross = Decimal("0.00")
        total_deductions = Decimal("0.00")
        total_payout = Decimal("0.00")

        for employee in employees:
            structure = await self.get_active_structure(employee.id)
            if not structure:
                results.append({
                    "employee_id": employee.id,
                    "employee_code": employee.employee_code,
                    "status": "skipped",
                    "net": None,
                    "reason": "No active salary structure",
                })
                continue

            totals = compute_salary(structure)
            total_gross += totals["gross"]
            total_deductions += totals["deductions"]
            total_payout += totals["net"]
            processed.append(employee)
            results.append({
                "employee_id": employee.id,
                "employee_code": employee.employee_code,
                "status": "processed",
                "net": totals["net"],
                "reason": None,
            })

        stats = {
            "headCount": len(processed),
            "skippedCount": len(results) - len(processed),
            "totalGross": float(total_gross),
            "totalDeductions": float(total_deductions),
            "results": [
                {
                    **r,
                    "employee_id": str(r["employee_id"]),
                    "net": float(r["net"]) if r["net"] is not None else None,
                }
                for r in results
            ],
        }

        now = datetime.now(timezone.utc)
        if run is None:
            run = PayrollRun(company_id=company_id, month=month, year=year)
            self.db.add(run)

        run.status = PayrollStatus.PROCESSED.value
        run.total_payout = total_payout
        run.stats = stats
        run.processed_at = now
        run.employees = processed

        await self.db.flush()

        skipped = stats["skippedCount"]
        if skipped:
            logger.warning(
                f"Payroll {month}/{year} for company {company_id}: "
                f"{len(processed)} processed, {skipped} skipped"
            )
        else:
            logger.info(f"Payroll {month}/{year} for company {company_id}: {len(processed)} processed")

        return {
            "id": run.id,
            "company_id": run.company_id,
            "month": run.month,
            "year": run.year,
            "status": run.status,
            "total_payout": run.total_payout,
            "stats": run.stats,
            "processed_at": run.processed_at,
            "paid_at": run.paid_at,
            "created_at": run.created_at,
            "updated_at": run.updated_at,
            "results": results,
        }

    async def get_payroll_history(self, company_id: uuid.UUID) -> List[PayrollRun]:
        result = await self.db.execute(
            select(PayrollRun)
            .where(PayrollRun.company_id == company_id)
            .order_by(PayrollRun.year.desc(), PayrollRun.month.desc())
        )
        return list(result.scalars().all())

    async def mark_paid(self, run_id: uuid.UUID) -> PayrollRun:
        run = await self.db.get(PayrollRun, run_id)
        if not run:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Payroll run not found"
            )
        if run.status != PayrollStatus.PROCESSED.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot pay a payroll run in '{run.status}' status"
            )

        run.status = PayrollStatus.PAID.value
        run.paid_at = datetime.now(timezone.utc)
        await self.db.flush()
        await self.db.refresh(run)

        logger.info(f"Payroll run {run_id} marked paid")
        return run
