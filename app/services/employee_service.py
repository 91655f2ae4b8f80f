"""
Employee Service.

Onboarding, updates and termination (soft delete).
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.employee import Employee, EmployeeStatus, can_transition
from app.models.organization import Company, Department, Group, Role
from app.schemas.employee import EmployeeCreate, EmployeeUpdate


logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for employee records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_employees(
        self,
        company_id: Optional[uuid.UUID] = None,
        status_filter: Optional[EmployeeStatus] = None,
    ) -> List[Employee]:
        query = select(Employee).order_by(Employee.employee_code)
        if company_id:
            query = query.where(Employee.company_id == company_id)
        if status_filter:
            query = query.where(Employee.status == EmployeeStatus(status_filter).value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_employee(self, employee_id: uuid.UUID) -> Employee:
        employee = await self.db.get(Employee, employee_id)
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Employee with ID {employee_id} not found"
            )
        return employee

    async def _check_unique(self, data: EmployeeCreate) -> None:
        conditions = [
            Employee.employee_code == data.employee_code,
            Employee.personal_email == data.personal_email,
        ]
        if data.work_email:
            conditions.append(Employee.work_email == data.work_email)
        if data.phone:
            conditions.append(Employee.phone == data.phone)

        existing = await self.db.execute(select(Employee).where(or_(*conditions)).limit(1))
        duplicate = existing.scalar_one_or_none()
        if duplicate:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Employee already exists with code {duplicate.employee_code} or the same email/phone"
            )

    async def _check_contact_unique(self, employee: Employee, changes: dict) -> None:
        """work_email/phone changes must not collide with another employee."""
        conditions = [
            getattr(Employee, field) == changes[field]
            for field in ("work_email", "phone")
            if changes.get(field) and changes[field] != getattr(employee, field)
        ]
        if not conditions:
            return

        existing = await self.db.execute(
            select(Employee.employee_code)
            .where(or_(*conditions), Employee.id != employee.id)
            .limit(1)
        )
        duplicate = existing.scalar_one_or_none()
        if duplicate:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Email or phone already belongs to employee {duplicate}"
            )

    async def _check_references(self, values: dict) -> None:
        """Referenced group/department/role/manager rows must exist."""
        references = (
            ("group_id", Group, "Group"),
            ("department_id", Department, "Department"),
            ("role_id", Role, "Role"),
            ("reporting_manager_id", Employee, "Reporting manager"),
        )
        for field, model, label in references:
            if values.get(field) and not await self.db.get(model, values[field]):
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"{label} not found"
                )

    async def create_employee(self, data: EmployeeCreate) -> Employee:
        company = await self.db.get(Company, data.company_id)
        if not company:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Company not found"
            )
        await self._check_unique(data)
        await self._check_references(data.model_dump())

        values = data.model_dump()
        values["status"] = EmployeeStatus(values["status"]).value
        values["group_id"] = values.get("group_id") or company.group_id

        employee = Employee(**values)
        self.db.add(employee)
        await self.db.flush()
        await self.db.refresh(employee)

        logger.info(f"Employee onboarded: {employee.employee_code}")
        return employee

    async def update_employee(self, employee_id: uuid.UUID, data: EmployeeUpdate) -> Employee:
        employee = await self.get_employee(employee_id)
        update_data = data.model_dump(exclude_unset=True)

        new_status = update_data.pop("status", None)
        if new_status is not None:
            new_status = EmployeeStatus(new_status).value
            if not can_transition(employee.status, new_status):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Cannot change status from '{employee.status}' to '{new_status}'"
                )

        if employee.status == EmployeeStatus.TERMINATED.value and update_data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Terminated employees cannot be modified"
            )

        await self._check_references(update_data)
        await self._check_contact_unique(employee, update_data)

        for field, value in update_data.items():
            setattr(employee, field, value)

        if new_status is not None and new_status != employee.status:
            employee.status = new_status
            if new_status == EmployeeStatus.TERMINATED.value:
                employee.deleted_at = datetime.now(timezone.utc)

        await self.db.flush()
        await self.db.refresh(employee)
        return employee

    async def terminate_employee(self, employee_id: uuid.UUID) -> Employee:
        """Soft delete: move to TERMINATED. The row is kept."""
        employee = await self.get_employee(employee_id)
        if employee.status == EmployeeStatus.TERMINATED.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Employee is already terminated"
            )

        employee.status = EmployeeStatus.TERMINATED.value
        employee.deleted_at = datetime.now(timezone.utc)
        await self.db.flush()
        await self.db.refresh(employee)

        logger.info(f"Employee terminated: {employee.employee_code}")
        return employee
