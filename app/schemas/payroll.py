"""Pydantic schemas for salary structures and payroll runs."""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import BaseResponseSchema


# ==================== Salary Structure Schemas ====================

class SalaryStructureCreate(BaseModel):
    """Schema for setting an employee's salary structure."""
    company_id: Optional[UUID] = None  # Defaults to the employee's company

    basic: Decimal = Field(..., ge=0)
    hra: Decimal = Field(Decimal("0"), ge=0)
    conveyance: Decimal = Field(Decimal("0"), ge=0)
    medical: Decimal = Field(Decimal("0"), ge=0)
    special_allowance: Decimal = Field(Decimal("0"), ge=0)

    pf_employee: Decimal = Field(Decimal("0"), ge=0)
    pf_employer: Decimal = Field(Decimal("0"), ge=0)
    esi_employee: Decimal = Field(Decimal("0"), ge=0)
    esi_employer: Decimal = Field(Decimal("0"), ge=0)
    pt: Decimal = Field(Decimal("0"), ge=0)


class SalaryStructureResponse(BaseResponseSchema):
    """Response schema for SalaryStructure."""
    id: UUID
    employee_id: UUID
    company_id: Optional[UUID] = None

    basic: Decimal
    hra: Decimal
    conveyance: Decimal
    medical: Decimal
    special_allowance: Decimal

    pf_employee: Decimal
    pf_employer: Decimal
    esi_employee: Decimal
    esi_employer: Decimal
    pt: Decimal

    is_active: bool
    created_at: datetime


class SalaryBreakdown(BaseModel):
    """Monthly salary computed from the active structure."""
    employee_id: UUID
    employee_name: str
    month: int
    year: int
    gross: Decimal
    deductions: Decimal
    net: Decimal
    breakdown: dict


# ==================== Payroll Run Schemas ====================

class PayrollProcessRequest(BaseModel):
    """Schema for processing payroll."""
    company_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)


class PayrollEmployeeResult(BaseModel):
    """Outcome for one employee in a payroll batch."""
    employee_id: UUID
    employee_code: str
    status: str  # processed, skipped
    net: Optional[Decimal] = None
    reason: Optional[str] = None


class PayrollRunResponse(BaseResponseSchema):
    """Response schema for PayrollRun."""
    id: UUID
    company_id: UUID
    month: int
    year: int
    status: str
    total_payout: Decimal
    stats: Optional[dict] = None
    processed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PayrollProcessResponse(PayrollRunResponse):
    """Payroll run plus the per-employee batch outcome."""
    results: List[PayrollEmployeeResult] = []
