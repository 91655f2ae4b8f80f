"""
Organization Service.

Groups, companies, departments and roles.
"""
import logging
import uuid
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.employee import Employee
from app.models.organization import Group, Company, Department, Role
from app.schemas.organization import GroupCreate, CompanyCreate, DepartmentCreate, RoleCreate


logger = logging.getLogger(__name__)


class OrganizationService:
    """Service for the organization tree."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require(self, model, row_id: Optional[uuid.UUID], label: str) -> None:
        if row_id and not await self.db.get(model, row_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label} not found"
            )

    # =========================================================================
    # GROUPS
    # =========================================================================

    async def list_groups(self) -> List[Group]:
        result = await self.db.execute(
            select(Group).where(Group.deleted_at.is_(None)).order_by(Group.name)
        )
        return list(result.scalars().all())

    async def create_group(self, data: GroupCreate) -> Group:
        group = Group(**data.model_dump())
        self.db.add(group)
        await self.db.flush()
        await self.db.refresh(group)
        return group

    # =========================================================================
    # COMPANIES
    # =========================================================================

    async def list_companies(self, group_id: Optional[uuid.UUID] = None) -> List[Company]:
        query = select(Company).where(Company.deleted_at.is_(None)).order_by(Company.name)
        if group_id:
            query = query.where(Company.group_id == group_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_company(self, data: CompanyCreate) -> Company:
        if not await self.db.get(Group, data.group_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Group not found"
            )

        code = data.code.upper()
        existing = await self.db.execute(select(Company.id).where(Company.code == code))
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Company code {code} already exists"
            )

        values = data.model_dump()
        values["code"] = code
        company = Company(**values)
        self.db.add(company)
        await self.db.flush()
        await self.db.refresh(company)

        logger.info(f"Company created: {company.code}")
        return company

    # =========================================================================
    # DEPARTMENTS
    # =========================================================================

    async def list_departments(self, company_id: Optional[uuid.UUID] = None) -> List[Department]:
        query = (
            select(Department)
            .where(Department.deleted_at.is_(None))
            .order_by(Department.level, Department.name)
        )
        if company_id:
            query = query.where(Department.company_id == company_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_department(self, data: DepartmentCreate) -> Department:
        await self._require(Company, data.company_id, "Company")
        await self._require(Employee, data.head_id, "Department head")

        level = 1
        path = data.code or data.name
        if data.parent_id:
            parent = await self.db.get(Department, data.parent_id)
            if not parent or parent.company_id != data.company_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Parent department not found in this company"
                )
            level = parent.level + 1
            path = f"{parent.path or parent.name}/{path}"

        department = Department(**data.model_dump(), level=level, path=path)
        self.db.add(department)
        await self.db.flush()
        await self.db.refresh(department)
        return department

    # =========================================================================
    # ROLES
    # =========================================================================

    async def list_roles(self, company_id: Optional[uuid.UUID] = None) -> List[Role]:
        query = select(Role).where(Role.deleted_at.is_(None)).order_by(Role.title)
        if company_id:
            query = query.where(Role.company_id == company_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_role(self, data: RoleCreate) -> Role:
        await self._require(Company, data.company_id, "Company")
        await self._require(Department, data.department_id, "Department")

        role = Role(**data.model_dump())
        self.db.add(role)
        await self.db.flush()
        await self.db.refresh(role)
        return role
