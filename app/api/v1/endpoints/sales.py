"""API endpoints for sales records and incentives."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import DB
from app.schemas.sales import (
    SalesRecordCreate, SalesDataResponse,
    IncentiveCalculateRequest, IncentiveResponse,
)
from app.services.sales_service import SalesService


router = APIRouter()


@router.post("/record", response_model=SalesDataResponse, status_code=status.HTTP_201_CREATED)
async def add_sales_record(data: SalesRecordCreate, db: DB):
    return await SalesService(db).add_sales_record(data.employee_id, data.company_id, data.data)


@router.get("/employee/{employee_id}", response_model=List[SalesDataResponse])
async def get_employee_sales(employee_id: UUID, db: DB):
    return await SalesService(db).get_employee_sales(employee_id)


@router.post("/calculate-incentive", response_model=IncentiveResponse)
async def calculate_incentive(data: IncentiveCalculateRequest, db: DB):
    """Calculate (or recalculate) an employee's incentive for a month."""
    return await SalesService(db).calculate_incentive(
        data.employee_id, data.month, data.year, data.company_id
    )
