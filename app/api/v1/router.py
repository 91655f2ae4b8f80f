from fastapi import APIRouter, Depends

from app.api.deps import get_current_identity
from app.api.v1.endpoints import (
    # Organization & People
    organization,
    employees,
    # Time & Leave
    attendance,
    leave,
    # Compensation
    payroll,
    sales,
    # Documents
    documents,
    # AI Insights
    ai,
    # Identity Provider
    webhooks,
)

api_router = APIRouter(prefix="/api/v1")

# Every router except webhooks requires a valid session token
authenticated = [Depends(get_current_identity)]

# Organization & People
api_router.include_router(organization.router, prefix="/organization", tags=["Organization"], dependencies=authenticated)
api_router.include_router(employees.router, prefix="/employees", tags=["Employees"], dependencies=authenticated)

# Time & Leave
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"], dependencies=authenticated)
api_router.include_router(leave.router, prefix="/leave", tags=["Leave"], dependencies=authenticated)

# Compensation
api_router.include_router(payroll.router, prefix="/payroll", tags=["Payroll"], dependencies=authenticated)
api_router.include_router(sales.router, prefix="/sales", tags=["Sales & Incentives"], dependencies=authenticated)

# Documents
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"], dependencies=authenticated)

# AI Insights
api_router.include_router(ai.router, prefix="/ai", tags=["AI Insights"], dependencies=authenticated)

# Identity Provider (signature-authenticated)
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
