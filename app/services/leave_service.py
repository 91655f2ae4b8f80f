"""
Leave Service.

Leave types and leave applications.
"""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.models.employee import Employee
from app.models.organization import Company
from app.models.leave import LeaveType, LeaveApplication, LeaveStatus
from app.schemas.leave import LeaveTypeCreate, LeaveApplicationData


logger = logging.getLogger(__name__)


class LeaveService:
    """Service for leave management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # LEAVE TYPES
    # =========================================================================

    async def list_types(self, company_id: Optional[uuid.UUID] = None) -> List[LeaveType]:
        query = select(LeaveType).order_by(LeaveType.name)
        if company_id:
            query = query.where(LeaveType.company_id == company_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_type(self, data: LeaveTypeCreate) -> LeaveType:
        if not await self.db.get(Company, data.company_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Company not found"
            )
        leave_type = LeaveType(**data.model_dump())
        self.db.add(leave_type)
        await self.db.flush()
        await self.db.refresh(leave_type)
        return leave_type

    # =========================================================================
    # APPLICATIONS
    # =========================================================================

    async def apply_leave(
        self,
        employee_id: uuid.UUID,
        leave_type_id: uuid.UUID,
        data: LeaveApplicationData,
    ) -> LeaveApplication:
        """Create a pending leave application. No quota check is performed."""
        if data.end_date < data.start_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="End date cannot be before start date"
            )

        if not await self.db.get(Employee, employee_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )
        if not await self.db.get(LeaveType, leave_type_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Leave type not found"
            )

        # Inclusive day count when not given (half days must be explicit)
        days = data.days
        if days is None:
            days = Decimal((data.end_date - data.start_date).days + 1)

        leave = LeaveApplication(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=data.start_date,
            end_date=data.end_date,
            days=days,
            reason=data.reason,
            status=LeaveStatus.PENDING.value,
        )
        self.db.add(leave)
        await self.db.flush()
        await self.db.refresh(leave)

        logger.info(f"Leave applied: employee={employee_id} days={days}")
        return leave

    async def get_employee_leaves(self, employee_id: uuid.UUID) -> List[LeaveApplication]:
        result = await self.db.execute(
            select(LeaveApplication)
            .options(selectinload(LeaveApplication.leave_type))
            .where(LeaveApplication.employee_id == employee_id)
            .order_by(LeaveApplication.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        leave_id: uuid.UUID,
        new_status: LeaveStatus,
        approver_id: Optional[uuid.UUID] = None,
    ) -> LeaveApplication:
        """
        Set the status of an application.

        Any status may overwrite any other; the approver and approval time are
        recorded on every call.
        """
        leave = await self.db.get(LeaveApplication, leave_id)
        if not leave:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Leave application not found"
            )

        if approver_id and not await self.db.get(Employee, approver_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Approver not found"
            )

        previous = leave.status
        leave.status = LeaveStatus(new_status).value
        leave.approved_by_id = approver_id
        leave.approved_at = datetime.now(timezone.utc)

        await self.db.flush()
        await self.db.refresh(leave)

        logger.info(f"Leave {leave_id}: {previous} -> {leave.status}")
        return leave
