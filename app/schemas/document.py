"""Pydantic schemas for document records."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.document import DocumentType
from app.schemas.base import BaseResponseSchema


class DocumentCreate(BaseModel):
    """Schema for registering an already-uploaded document."""
    employee_id: UUID
    company_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    type: DocumentType = DocumentType.OTHER
    url: str = Field(..., min_length=1, max_length=1000)


class DocumentResponse(BaseResponseSchema):
    """Response schema for DocumentRecord."""
    id: UUID
    employee_id: UUID
    company_id: UUID
    name: str
    type: str
    url: str
    status: str
    created_at: datetime


class DocumentEmployeeInfo(BaseResponseSchema):
    """Employee summary embedded in company document listings."""
    id: UUID
    employee_code: str
    full_name: str


class DocumentWithEmployeeResponse(DocumentResponse):
    """Document record with its employee."""
    employee: Optional[DocumentEmployeeInfo] = None
