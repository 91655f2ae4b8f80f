"""Pydantic schemas for groups, companies, departments and roles."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import BaseResponseSchema


# ==================== Group Schemas ====================

class GroupCreate(BaseModel):
    """Schema for creating Group."""
    name: str = Field(..., min_length=1, max_length=200)
    logo_url: Optional[str] = Field(None, max_length=500)
    primary_color: str = Field("#3B82F6", max_length=20)
    settings: Optional[dict] = None


class GroupResponse(BaseResponseSchema):
    """Response schema for Group."""
    id: UUID
    name: str
    logo_url: Optional[str] = None
    primary_color: str
    settings: Optional[dict] = None
    created_at: datetime
    updated_at: datetime


# ==================== Company Schemas ====================

class CompanyCreate(BaseModel):
    """Schema for creating Company."""
    group_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    legal_name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20)
    gstin: Optional[str] = Field(None, max_length=15)
    pan: Optional[str] = Field(None, max_length=10)
    tan: Optional[str] = Field(None, max_length=10)
    registered_address: str
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=10)
    country: str = "India"
    settings: Optional[dict] = None


class CompanyResponse(BaseResponseSchema):
    """Response schema for Company."""
    id: UUID
    group_id: UUID
    name: str
    legal_name: str
    code: str
    gstin: Optional[str] = None
    pan: Optional[str] = None
    tan: Optional[str] = None
    registered_address: str
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ==================== Department Schemas ====================

class DepartmentCreate(BaseModel):
    """Schema for creating Department."""
    company_id: UUID
    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None
    parent_id: Optional[UUID] = None
    head_id: Optional[UUID] = None


class DepartmentResponse(BaseResponseSchema):
    """Response schema for Department."""
    id: UUID
    company_id: UUID
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[UUID] = None
    head_id: Optional[UUID] = None
    level: int
    path: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ==================== Role Schemas ====================

class RoleCreate(BaseModel):
    """Schema for creating Role."""
    company_id: UUID
    department_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=20)
    job_description: Optional[str] = None
    is_sales_role: bool = False


class RoleResponse(BaseResponseSchema):
    """Response schema for Role."""
    id: UUID
    company_id: UUID
    department_id: Optional[UUID] = None
    title: str
    code: Optional[str] = None
    job_description: Optional[str] = None
    is_sales_role: bool
    is_active: bool
    created_at: datetime
