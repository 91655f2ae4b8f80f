"""API endpoints for leave types and applications."""
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import DB
from app.schemas.leave import (
    LeaveTypeCreate, LeaveTypeResponse,
    LeaveApplyRequest, LeaveStatusUpdate,
    LeaveApplicationResponse, LeaveApplicationDetail,
)
from app.services.leave_service import LeaveService


router = APIRouter()


@router.get("/types", response_model=List[LeaveTypeResponse])
async def list_leave_types(
    db: DB,
    company_id: Optional[UUID] = Query(None),
):
    """List leave types, optionally for one company."""
    return await LeaveService(db).list_types(company_id)


@router.post("/types", response_model=LeaveTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_type(data: LeaveTypeCreate, db: DB):
    return await LeaveService(db).create_type(data)


@router.post("/apply", response_model=LeaveApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_leave(data: LeaveApplyRequest, db: DB):
    """Apply for leave. The application starts as pending."""
    return await LeaveService(db).apply_leave(data.employee_id, data.leave_type_id, data.data)


@router.get("/employee/{employee_id}", response_model=List[LeaveApplicationDetail])
async def get_employee_leaves(employee_id: UUID, db: DB):
    return await LeaveService(db).get_employee_leaves(employee_id)


@router.patch("/status/{leave_id}", response_model=LeaveApplicationResponse)
async def update_leave_status(leave_id: UUID, data: LeaveStatusUpdate, db: DB):
    """Approve, reject or cancel a leave application."""
    return await LeaveService(db).update_status(leave_id, data.status, data.approver_id)
