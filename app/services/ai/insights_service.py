"""
AI Insights Service.

Attrition risk and sales forecast insights generated by Gemini. Model
failures never propagate: a fixed fallback answer is returned instead.
"""
import json
import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Dict, Any

from pydantic import ValidationError
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.attendance import Attendance, AttendanceStatus
from app.models.employee import Employee
from app.models.leave import LeaveApplication, LeaveStatus
from app.models.sales import SalesData
from app.schemas.ai import AttritionRiskResponse, SalesForecastResponse
from app.services.ai.gemini_client import GeminiClient, GeminiError
from app.services.attendance_service import local_today, month_bounds


logger = logging.getLogger(__name__)

ATTRITION_FALLBACK = {"score": 50, "reasons": ["Unable to calculate due to system error"]}
FORECAST_FALLBACK = {"forecast": "Steady", "suggestions": ["Verify data points"]}

# Used when no employee/company is given
SAMPLE_EMPLOYEE_DATA = {
    "attendanceRate": 85,
    "leavesTaken": 3,
    "lateArrivals": 5,
    "tenureMonths": 14,
}
SAMPLE_SALES_DATA = {
    "currentRevenue": 500000,
    "targetRevenue": 600000,
    "openDeals": 12,
    "conversionRate": 0.25,
}

ATTRITION_PROMPT = """
Analyze the following employee attendance and performance data for attrition risk:
{data}

Provide a risk score (0-100) and 3 bullet points for reasons.
Format: JSON {{ "score": number, "reasons": string[] }}
"""

FORECAST_PROMPT = """
Predict sales incentive trends based on current performance:
{data}

Suggest 2 operational improvements to boost conversion.
Format: JSON {{ "forecast": string, "suggestions": string[] }}
"""

ATTENDANCE_WINDOW_DAYS = 90


def _working_days(start: date, end: date) -> int:
    """Weekdays in [start, end]."""
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def _months_between(start: date, end: date) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


class AIInsightsService:
    """Builds prompts from HR data and asks Gemini for insights."""

    def __init__(self, db: AsyncSession, client: Optional[GeminiClient] = None):
        self.db = db
        self.client = client or GeminiClient()

    # =========================================================================
    # PROMPT INPUTS
    # =========================================================================

    async def build_employee_data(self, employee_id: uuid.UUID) -> Dict[str, Any]:
        employee = await self.db.get(Employee, employee_id)
        if not employee:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )

        today = local_today()
        window_start = today - timedelta(days=ATTENDANCE_WINDOW_DAYS)
        if employee.joining_date and employee.joining_date > window_start:
            window_start = employee.joining_date

        present = await self.db.scalar(
            select(func.count(Attendance.id)).where(
                Attendance.employee_id == employee_id,
                Attendance.attendance_date >= window_start,
                Attendance.attendance_date <= today,
                Attendance.status.in_([AttendanceStatus.PRESENT.value, AttendanceStatus.HALF_DAY.value]),
            )
        ) or 0
        late = await self.db.scalar(
            select(func.count(Attendance.id)).where(
                Attendance.employee_id == employee_id,
                Attendance.attendance_date >= window_start,
                Attendance.is_late.is_(True),
            )
        ) or 0
        leave_days = await self.db.scalar(
            select(func.coalesce(func.sum(LeaveApplication.days), 0)).where(
                LeaveApplication.employee_id == employee_id,
                LeaveApplication.status == LeaveStatus.APPROVED.value,
            )
        ) or 0

        working_days = _working_days(window_start, today)
        attendance_rate = round(present / working_days * 100, 1) if working_days else 0.0

        return {
            "attendanceRate": min(attendance_rate, 100.0),
            "leavesTaken": float(Decimal(str(leave_days))),
            "lateArrivals": int(late),
            "tenureMonths": _months_between(employee.joining_date, today) if employee.joining_date else 0,
        }

    async def build_sales_data(self, company_id: uuid.UUID) -> Dict[str, Any]:
        today = local_today()
        start, end = month_bounds(today.month, today.year)

        row = (await self.db.execute(
            select(
                func.coalesce(func.sum(SalesData.achieved_amount), 0),
                func.coalesce(func.sum(SalesData.target_amount), 0),
                func.count(SalesData.id),
            ).where(
                SalesData.company_id == company_id,
                SalesData.sale_date >= start,
                SalesData.sale_date <= end,
            )
        )).one()
        achieved, target, records = Decimal(str(row[0])), Decimal(str(row[1])), int(row[2])

        return {
            "currentRevenue": float(achieved),
            "targetRevenue": float(target),
            "records": records,
            "achievementPercentage": float(round(achieved / target * 100, 2)) if target else 0.0,
        }

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    async def get_attrition_risk(self, employee_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        data = await self.build_employee_data(employee_id) if employee_id else SAMPLE_EMPLOYEE_DATA
        prompt = ATTRITION_PROMPT.format(data=json.dumps(data))

        try:
            answer = await self.client.generate_json(prompt)
            return AttritionRiskResponse.model_validate(answer).model_dump()
        except (GeminiError, ValidationError) as e:
            logger.error(f"Failed to generate attrition insight: {e}")
            return dict(ATTRITION_FALLBACK)

    async def get_sales_forecast(self, company_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        data = await self.build_sales_data(company_id) if company_id else SAMPLE_SALES_DATA
        prompt = FORECAST_PROMPT.format(data=json.dumps(data))

        try:
            answer = await self.client.generate_json(prompt)
            return SalesForecastResponse.model_validate(answer).model_dump()
        except (GeminiError, ValidationError) as e:
            logger.error(f"Failed to generate sales forecast: {e}")
            return dict(FORECAST_FALLBACK)
