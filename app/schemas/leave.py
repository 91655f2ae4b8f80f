"""Pydantic schemas for leave types and applications."""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.leave import LeaveStatus
from app.schemas.base import BaseResponseSchema


# ==================== Leave Type Schemas ====================

class LeaveTypeCreate(BaseModel):
    """Schema for creating LeaveType."""
    company_id: UUID
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=20)
    is_paid: bool = True
    annual_quota: Optional[int] = Field(None, ge=0)


class LeaveTypeResponse(BaseResponseSchema):
    """Response schema for LeaveType."""
    id: UUID
    company_id: UUID
    name: str
    code: str
    is_paid: bool
    annual_quota: Optional[int] = None


# ==================== Leave Application Schemas ====================

class LeaveApplicationData(BaseModel):
    """Leave period and reason."""
    start_date: date
    end_date: date
    days: Optional[Decimal] = Field(None, gt=0, description="Derived from the dates when omitted")
    reason: Optional[str] = None


class LeaveApplyRequest(BaseModel):
    """Schema for applying for leave."""
    employee_id: UUID
    leave_type_id: UUID
    data: LeaveApplicationData


class LeaveStatusUpdate(BaseModel):
    """Schema for approving/rejecting/cancelling a leave application."""
    status: LeaveStatus
    approver_id: Optional[UUID] = None


class LeaveApplicationResponse(BaseResponseSchema):
    """Response schema for LeaveApplication."""
    id: UUID
    employee_id: UUID
    leave_type_id: UUID
    start_date: date
    end_date: date
    days: Decimal
    reason: Optional[str] = None
    status: str
    approved_by_id: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LeaveApplicationDetail(LeaveApplicationResponse):
    """Leave application with its leave type."""
    leave_type: Optional[LeaveTypeResponse] = None
