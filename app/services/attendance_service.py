"""
Attendance Service.

Daily check-in/check-out with geolocation and computed work hours.
"""
import calendar
import logging
import uuid
from datetime import datetime, timezone, date, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.config import settings
from app.models.attendance import Attendance, AttendanceStatus
from app.models.employee import Employee
from app.models.organization import Company


logger = logging.getLogger(__name__)

# Check-ins after this local time are flagged late
LATE_AFTER = time(9, 30)
STANDARD_WORK_HOURS = Decimal("9.00")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_today() -> date:
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed decimal hours rounded to two places."""
    seconds = Decimal(str((as_utc(end) - as_utc(start)).total_seconds()))
    return (seconds / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class AttendanceService:
    """Service for attendance recording."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check_in(
        self,
        employee_id: uuid.UUID,
        company_id: uuid.UUID,
        location: Optional[dict] = None,
        checked_in_at: Optional[datetime] = None,
    ) -> Attendance:
        """Record today's check-in for an employee. One per employee per day."""
        employee = await self.db.get(Employee, employee_id)
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )
        if not await self.db.get(Company, company_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Company not found"
            )

        now = checked_in_at or datetime.now(timezone.utc)
        local_now = as_utc(now).astimezone(ZoneInfo(settings.TIMEZONE))
        today = local_now.date()

        existing = await self.db.execute(
            select(Attendance.id).where(
                Attendance.employee_id == employee_id,
                Attendance.attendance_date == today
            )
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Already checked in today"
            )

        attendance = Attendance(
            employee_id=employee_id,
            company_id=company_id,
            attendance_date=today,
            check_in=now,
            check_in_location=location,
            status=AttendanceStatus.PRESENT.value,
            is_late=local_now.time() > LATE_AFTER,
        )
        self.db.add(attendance)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent check-in for the same day
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Already checked in today"
            )

        logger.info(f"Employee {employee.employee_code} checked in for {today}")
        return attendance

    async def check_out(
        self,
        attendance_id: uuid.UUID,
        location: Optional[dict] = None,
        checked_out_at: Optional[datetime] = None,
    ) -> Attendance:
        """Record check-out and compute work hours."""
        attendance = await self.db.get(Attendance, attendance_id)
        if not attendance:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attendance record not found"
            )
        if attendance.is_locked:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Attendance record is locked"
            )
        if attendance.check_out is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already checked out"
            )
        if attendance.check_in is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No check-in recorded"
            )

        now = checked_out_at or datetime.now(timezone.utc)
        if as_utc(now) < as_utc(attendance.check_in):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Check-out cannot be before check-in"
            )

        work_hours = hours_between(attendance.check_in, now)
        attendance.check_out = now
        attendance.check_out_location = location
        attendance.work_hours = work_hours
        attendance.overtime_hours = max(work_hours - STANDARD_WORK_HOURS, Decimal("0"))

        await self.db.flush()
        await self.db.refresh(attendance)
        return attendance

    async def get_monthly_attendance(
        self,
        employee_id: uuid.UUID,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Attendance]:
        """Attendance rows inside a month, newest first. Defaults to the current month."""
        today = local_today()
        start, end = month_bounds(month or today.month, year or today.year)

        result = await self.db.execute(
            select(Attendance)
            .where(
                Attendance.employee_id == employee_id,
                Attendance.attendance_date >= start,
                Attendance.attendance_date <= end,
            )
            .order_by(Attendance.attendance_date.desc())
        )
        return list(result.scalars().all())

    async def get_employee_by_clerk_id(self, clerk_id: str) -> Employee:
        """Resolve the caller's employee record."""
        result = await self.db.execute(
            select(Employee).where(Employee.clerk_id == clerk_id)
        )
        employee = result.scalar_one_or_none()
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No employee linked to this account"
            )
        return employee

    async def lock_attendance_before(self, cutoff: date) -> int:
        """Lock every unlocked attendance row dated before `cutoff`."""
        result = await self.db.execute(
            update(Attendance)
            .where(
                Attendance.attendance_date < cutoff,
                Attendance.is_locked.is_(False)
            )
            .values(is_locked=True, updated_at=datetime.now(timezone.utc))
        )
        return result.rowcount or 0
