"""API endpoints for attendance check-in/check-out."""
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import DB, CurrentIdentity
from app.schemas.attendance import AttendanceCheckIn, AttendanceCheckOut, AttendanceResponse
from app.services.attendance_service import AttendanceService


router = APIRouter()


@router.post("/check-in", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def check_in(data: AttendanceCheckIn, db: DB):
    """Record today's check-in. A second check-in on the same day is rejected."""
    service = AttendanceService(db)
    return await service.check_in(data.employee_id, data.company_id, data.location)


@router.post("/check-out/{attendance_id}", response_model=AttendanceResponse)
async def check_out(attendance_id: UUID, data: AttendanceCheckOut, db: DB):
    """Record check-out and compute work hours."""
    service = AttendanceService(db)
    return await service.check_out(attendance_id, data.location)


@router.get("/monthly/{employee_id}", response_model=List[AttendanceResponse])
async def get_monthly_attendance(
    employee_id: UUID,
    db: DB,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
):
    """Attendance for a month (current month by default), newest first."""
    service = AttendanceService(db)
    return await service.get_monthly_attendance(employee_id, month, year)


@router.get("/me", response_model=List[AttendanceResponse])
async def get_my_attendance(
    identity: CurrentIdentity,
    db: DB,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
):
    """The caller's own attendance for a month."""
    service = AttendanceService(db)
    employee = await service.get_employee_by_clerk_id(identity.clerk_id)
    return await service.get_monthly_attendance(employee.id, month, year)
