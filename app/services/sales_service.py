"""
Sales Service.

Sales target/achievement records and tiered monthly incentives.
"""
import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.employee import Employee
from app.models.organization import Company
from app.models.sales import SalesData, Incentive, IncentiveStatus
from app.schemas.sales import SalesRecordData
from app.services.attendance_service import month_bounds


logger = logging.getLogger(__name__)

# Incentive tiers: share of achieved amount
TARGET_MET_RATE = Decimal("0.05")
TARGET_MISSED_RATE = Decimal("0.02")
TARGET_THRESHOLD = Decimal("100")

TWO_PLACES = Decimal("0.01")


def achievement_percentage(achieved: Decimal, target: Decimal) -> Decimal:
    """achieved / target * 100, two decimals. `target` must be positive."""
    return (Decimal(achieved) / Decimal(target) * 100).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def incentive_rate(achieved: Decimal, target: Decimal) -> Decimal:
    """Tier from the exact ratio; the rounded percentage is for display only."""
    met = Decimal(achieved) * 100 >= Decimal(target) * TARGET_THRESHOLD
    return TARGET_MET_RATE if met else TARGET_MISSED_RATE


class SalesService:
    """Service for sales records and incentives."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_sales_record(
        self,
        employee_id: uuid.UUID,
        company_id: uuid.UUID,
        data: SalesRecordData,
    ) -> SalesData:
        if not await self.db.get(Employee, employee_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Employee not found"
            )
        if not await self.db.get(Company, company_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Company not found"
            )

        record = SalesData(
            employee_id=employee_id,
            company_id=company_id,
            sale_date=data.sale_date,
            target_amount=data.target_amount,
            achieved_amount=data.achieved_amount,
            achievement_percentage=achievement_percentage(data.achieved_amount, data.target_amount),
            details=data.details,
        )
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def get_employee_sales(self, employee_id: uuid.UUID) -> List[SalesData]:
        result = await self.db.execute(
            select(SalesData)
            .where(SalesData.employee_id == employee_id)
            .order_by(SalesData.sale_date.desc(), SalesData.created_at.desc())
        )
        return list(result.scalars().all())

    async def calculate_incentive(
        self,
        employee_id: uuid.UUID,
        month: int,
        year: int,
        company_id: Optional[uuid.UUID] = None,
    ) -> Incentive:
        """
        Aggregate the employee's sales for a month and store the incentive.

        5% of achieved when the aggregate reaches 100% of target, else 2%.
        Recalculating the same month updates the existing incentive while it is
        still pending; approved or paid incentives are final.
        """
        start, end = month_bounds(month, year)
        query = (
            select(SalesData)
            .where(
                SalesData.employee_id == employee_id,
                SalesData.sale_date >= start,
                SalesData.sale_date <= end,
            )
            .order_by(SalesData.sale_date.desc(), SalesData.created_at.desc())
        )
        if company_id:
            query = query.where(SalesData.company_id == company_id)
        result = await self.db.execute(query)
        records = list(result.scalars().all())

        if not records:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No sales records for {month}/{year}"
            )

        total_achieved = sum((Decimal(r.achieved_amount) for r in records), Decimal("0"))
        total_target = sum((Decimal(r.target_amount) for r in records), Decimal("0"))
        percentage = achievement_percentage(total_achieved, total_target)
        rate = incentive_rate(total_achieved, total_target)
        amount = (total_achieved * rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

        breakdown = {
            "totalAchieved": float(total_achieved),
            "totalTarget": float(total_target),
            "percentage": float(percentage),
            "rate": float(rate),
            "records": len(records),
        }
        # Most recent record decides the company when none is given
        target_company_id = company_id or records[0].company_id

        existing = await self.db.execute(
            select(Incentive).where(
                Incentive.employee_id == employee_id,
                Incentive.month == month,
                Incentive.year == year
            )
        )
        incentive = existing.scalar_one_or_none()
        if incentive is not None and incentive.status != IncentiveStatus.PENDING.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Incentive for {month}/{year} is already {incentive.status}"
            )
        if incentive is None:
            incentive = Incentive(employee_id=employee_id, month=month, year=year)
            self.db.add(incentive)

        incentive.company_id = target_company_id
        incentive.total_incentive = amount
        incentive.status = IncentiveStatus.PENDING.value
        incentive.breakdown = breakdown

        await self.db.flush()
        await self.db.refresh(incentive)

        logger.info(
            f"Incentive {month}/{year} for employee {employee_id}: "
            f"{amount} at {rate} ({percentage}% of target)"
        )
        return incentive
