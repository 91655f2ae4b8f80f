"""
AI insight endpoints.

Both endpoints always answer 200: when the model is unavailable or
replies with something unusable, a fixed fallback is returned.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from app.api.deps import DB, Gemini
from app.schemas.ai import AttritionRiskResponse, SalesForecastResponse
from app.services.ai.insights_service import AIInsightsService


router = APIRouter()


@router.get("/attrition-risk", response_model=AttritionRiskResponse)
async def get_attrition_risk(
    db: DB,
    client: Gemini,
    employee_id: Optional[UUID] = Query(None, description="Employee to score; sample data when omitted"),
):
    service = AIInsightsService(db, client)
    return await service.get_attrition_risk(employee_id)


@router.get("/sales-forecast", response_model=SalesForecastResponse)
async def get_sales_forecast(
    db: DB,
    client: Gemini,
    company_id: Optional[UUID] = Query(None, description="Company to forecast; sample data when omitted"),
):
    service = AIInsightsService(db, client)
    return await service.get_sales_forecast(company_id)
