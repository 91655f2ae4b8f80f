"""API endpoints for groups, companies, departments and roles."""
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import DB
from app.schemas.organization import (
    GroupCreate, GroupResponse,
    CompanyCreate, CompanyResponse,
    DepartmentCreate, DepartmentResponse,
    RoleCreate, RoleResponse,
)
from app.services.organization_service import OrganizationService


router = APIRouter()


# ==================== Groups ====================

@router.get("/groups", response_model=List[GroupResponse])
async def list_groups(db: DB):
    return await OrganizationService(db).list_groups()


@router.post("/groups", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(data: GroupCreate, db: DB):
    return await OrganizationService(db).create_group(data)


# ==================== Companies ====================

@router.get("/companies", response_model=List[CompanyResponse])
async def list_companies(db: DB, group_id: Optional[UUID] = Query(None)):
    return await OrganizationService(db).list_companies(group_id)


@router.post("/companies", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(data: CompanyCreate, db: DB):
    """Create a company. Codes are stored upper-case and must be unique."""
    return await OrganizationService(db).create_company(data)


# ==================== Departments ====================

@router.get("/departments", response_model=List[DepartmentResponse])
async def list_departments(db: DB, company_id: Optional[UUID] = Query(None)):
    return await OrganizationService(db).list_departments(company_id)


@router.post("/departments", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(data: DepartmentCreate, db: DB):
    return await OrganizationService(db).create_department(data)


# ==================== Roles ====================

@router.get("/roles", response_model=List[RoleResponse])
async def list_roles(db: DB, company_id: Optional[UUID] = Query(None)):
    return await OrganizationService(db).list_roles(company_id)


@router.post("/roles", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(data: RoleCreate, db: DB):
    return await OrganizationService(db).create_role(data)
