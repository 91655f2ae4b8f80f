"""
Identity Sync Service.

Keeps Employee rows in step with Clerk users delivered over webhooks.
"""
import logging
import time
import uuid
from datetime import date, datetime, timezone
from typing import Optional, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.employee import Employee, EmployeeStatus
from app.models.organization import Company
from app.schemas.webhook import ClerkUserData


logger = logging.getLogger(__name__)


def generate_shell_employee_code() -> str:
    """Synthetic code for employees created from an identity event."""
    return f"EMP-{int(time.time() * 1000)}"


class SyncService:
    """Applies Clerk `user.*` events to employee records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def handle_event(self, event_type: str, data: dict[str, Any]) -> Optional[Employee]:
        if event_type == "user.created":
            return await self.handle_user_created(ClerkUserData.model_validate(data))
        if event_type == "user.updated":
            return await self.handle_user_updated(ClerkUserData.model_validate(data))
        if event_type == "user.deleted":
            return await self.handle_user_deleted(data.get("id"))

        logger.warning(f"Unhandled webhook type: {event_type}")
        return None

    async def _find_by_clerk_id(self, clerk_id: str) -> Optional[Employee]:
        result = await self.db.execute(select(Employee).where(Employee.clerk_id == clerk_id))
        return result.scalar_one_or_none()

    async def _default_ownership(self) -> tuple[Optional[uuid.UUID], Optional[uuid.UUID]]:
        """Group/company for new shell employees: configured defaults, else the first company."""
        group_id = uuid.UUID(settings.DEFAULT_GROUP_ID) if settings.DEFAULT_GROUP_ID else None
        company_id = uuid.UUID(settings.DEFAULT_COMPANY_ID) if settings.DEFAULT_COMPANY_ID else None

        if company_id is None:
            result = await self.db.execute(select(Company).order_by(Company.created_at).limit(1))
            company = result.scalar_one_or_none()
            if company:
                company_id = company.id
                group_id = group_id or company.group_id

        return group_id, company_id

    async def handle_user_created(self, user: ClerkUserData) -> Optional[Employee]:
        email = user.primary_email
        logger.info(f"Syncing new user from Clerk: {email} ({user.id})")

        if not email:
            logger.warning(f"Clerk user {user.id} has no email address; skipping")
            return None

        result = await self.db.execute(select(Employee).where(Employee.personal_email == email))
        employee = result.scalar_one_or_none()

        if employee is None:
            group_id, company_id = await self._default_ownership()
            employee = Employee(
                group_id=group_id,
                company_id=company_id,
                first_name=user.first_name or "",
                last_name=user.last_name or "",
                personal_email=email,
                clerk_id=user.id,
                profile_picture=user.image_url,
                status=EmployeeStatus.ACTIVE.value,
                employee_code=generate_shell_employee_code(),
                joining_date=date.today(),
            )
            self.db.add(employee)
            logger.info(f"Created shell employee {employee.employee_code} for {email}")
        else:
            employee.clerk_id = user.id
            employee.profile_picture = user.image_url
            logger.info(f"Linked Clerk user {user.id} to employee {employee.employee_code}")

        await self.db.flush()
        return employee

    async def handle_user_updated(self, user: ClerkUserData) -> Optional[Employee]:
        employee = await self._find_by_clerk_id(user.id)
        if employee is None:
            logger.info(f"user.updated for unknown Clerk user {user.id}; ignoring")
            return None

        employee.first_name = user.first_name or employee.first_name
        employee.last_name = user.last_name or employee.last_name
        employee.profile_picture = user.image_url or employee.profile_picture

        await self.db.flush()
        return employee

    async def handle_user_deleted(self, clerk_id: Optional[str]) -> Optional[Employee]:
        if not clerk_id:
            return None

        employee = await self._find_by_clerk_id(clerk_id)
        if employee is None:
            logger.info(f"user.deleted for unknown Clerk user {clerk_id}; ignoring")
            return None

        # Soft delete
        employee.status = EmployeeStatus.TERMINATED.value
        employee.deleted_at = employee.deleted_at or datetime.now(timezone.utc)
        await self.db.flush()
        logger.info(f"Employee {employee.employee_code} terminated via identity sync")
        return employee
