"""API endpoints for employee records."""
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import DB
from app.models.employee import EmployeeStatus
from app.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeResponse
from app.services.employee_service import EmployeeService


router = APIRouter()


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    db: DB,
    company_id: Optional[UUID] = Query(None),
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status"),
):
    """List employees, optionally filtered by company and status."""
    return await EmployeeService(db).list_employees(company_id, status_filter)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(data: EmployeeCreate, db: DB):
    """Onboard a new employee."""
    return await EmployeeService(db).create_employee(data)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: UUID, db: DB):
    return await EmployeeService(db).get_employee(employee_id)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(employee_id: UUID, data: EmployeeUpdate, db: DB):
    """
    Update an employee.

    Status changes must follow the lifecycle; terminated is final.
    """
    return await EmployeeService(db).update_employee(employee_id, data)


@router.delete("/{employee_id}", response_model=EmployeeResponse)
async def terminate_employee(employee_id: UUID, db: DB):
    """Terminate an employee. The record is kept."""
    return await EmployeeService(db).terminate_employee(employee_id)
