"""Pydantic schemas for attendance."""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from app.schemas.base import BaseResponseSchema


class AttendanceCheckIn(BaseModel):
    """Schema for check-in."""
    employee_id: UUID
    company_id: UUID
    location: Optional[dict] = None  # {lat, lng, address}


class AttendanceCheckOut(BaseModel):
    """Schema for check-out."""
    location: Optional[dict] = None


class AttendanceResponse(BaseResponseSchema):
    """Response schema for Attendance."""
    id: UUID
    employee_id: UUID
    company_id: UUID
    attendance_date: date

    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    work_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None

    check_in_location: Optional[dict] = None
    check_out_location: Optional[dict] = None

    status: str
    is_late: bool = False
    is_locked: bool = False

    created_at: datetime
    updated_at: datetime
