"""Pydantic schemas for sales records and incentives."""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import BaseResponseSchema


class SalesRecordData(BaseModel):
    """Target and achievement for one sales entry."""
    sale_date: date = Field(default_factory=date.today)
    target_amount: Decimal = Field(..., gt=0)
    achieved_amount: Decimal = Field(Decimal("0"), ge=0)
    details: Optional[dict] = None


class SalesRecordCreate(BaseModel):
    """Schema for recording sales."""
    employee_id: UUID
    company_id: UUID
    data: SalesRecordData


class SalesDataResponse(BaseResponseSchema):
    """Response schema for SalesData."""
    id: UUID
    employee_id: UUID
    company_id: UUID
    sale_date: date
    target_amount: Decimal
    achieved_amount: Decimal
    achievement_percentage: Decimal
    details: Optional[dict] = None
    created_at: datetime


class IncentiveCalculateRequest(BaseModel):
    """Schema for calculating an employee's monthly incentive."""
    employee_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    company_id: Optional[UUID] = None


class IncentiveResponse(BaseResponseSchema):
    """Response schema for Incentive."""
    id: UUID
    employee_id: UUID
    company_id: UUID
    month: int
    year: int
    total_incentive: Decimal
    status: str
    breakdown: Optional[dict] = None
    created_at: datetime
    updated_at: datetime
