"""Pydantic schemas for employees."""
from datetime import datetime, date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, EmailStr

from app.models.employee import EmployeeStatus
from app.schemas.base import BaseResponseSchema


class EmployeeBase(BaseModel):
    """Base schema for Employee."""
    company_id: UUID
    group_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    role_id: Optional[UUID] = None
    reporting_manager_id: Optional[UUID] = None

    employee_code: str = Field(..., min_length=1, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

    personal_email: EmailStr
    work_email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)

    joining_date: date


class EmployeeCreate(EmployeeBase):
    """Schema for creating Employee (HR onboarding)."""
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeUpdate(BaseModel):
    """Schema for updating Employee. All fields optional."""
    department_id: Optional[UUID] = None
    role_id: Optional[UUID] = None
    reporting_manager_id: Optional[UUID] = None

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    work_email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    profile_picture: Optional[str] = Field(None, max_length=500)

    status: Optional[EmployeeStatus] = None


class EmployeeResponse(BaseResponseSchema):
    """Response schema for Employee."""
    id: UUID
    group_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    role_id: Optional[UUID] = None
    reporting_manager_id: Optional[UUID] = None

    employee_code: str
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    personal_email: str
    work_email: Optional[str] = None
    phone: Optional[str] = None

    clerk_id: Optional[str] = None
    profile_picture: Optional[str] = None
    joining_date: date
    status: str

    created_at: datetime
    updated_at: datetime
