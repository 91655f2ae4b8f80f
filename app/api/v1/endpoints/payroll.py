"""API endpoints for salary structures and payroll."""
from datetime import date
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.deps import DB
from app.schemas.payroll import (
    PayrollProcessRequest, PayrollProcessResponse, PayrollRunResponse,
    SalaryBreakdown, SalaryStructureCreate, SalaryStructureResponse,
)
from app.services.payroll_service import PayrollService


router = APIRouter()


@router.post("/process", response_model=PayrollProcessResponse)
async def process_payroll(data: PayrollProcessRequest, db: DB):
    """
    Process payroll for a company and month.

    Re-processing the same month updates the existing run. Employees without
    an active salary structure are reported as skipped.
    """
    return await PayrollService(db).process_payroll(data.company_id, data.month, data.year)


@router.get("/history/{company_id}", response_model=List[PayrollRunResponse])
async def get_payroll_history(company_id: UUID, db: DB):
    return await PayrollService(db).get_payroll_history(company_id)


@router.get("/calculate/{employee_id}", response_model=SalaryBreakdown)
async def calculate_salary(
    employee_id: UUID,
    db: DB,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
):
    """Monthly salary breakdown from the employee's active structure."""
    today = date.today()
    return await PayrollService(db).calculate_monthly_salary(
        employee_id, month or today.month, year or today.year
    )


@router.put("/salary-structure/{employee_id}", response_model=SalaryStructureResponse)
async def set_salary_structure(employee_id: UUID, data: SalaryStructureCreate, db: DB):
    """Replace the employee's active salary structure."""
    return await PayrollService(db).upsert_salary_structure(employee_id, data)


@router.post("/{run_id}/pay", response_model=PayrollRunResponse)
async def mark_payroll_paid(run_id: UUID, db: DB):
    return await PayrollService(db).mark_paid(run_id)
