"""Sales targets, achievements and incentives."""
import uuid
from datetime import datetime, date, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Integer, Numeric, Date
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.db_types import UUIDType, JSONType

if TYPE_CHECKING:
    from app.models.employee import Employee
    from app.models.organization import Company


class IncentiveStatus(str, Enum):
    """Incentive payout status."""
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class SalesData(Base):
    """
    Sales target vs. achievement for an employee on a date.
    Several records may fall in the same month.
    """
    __tablename__ = "sales_data"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False
    )
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)

    target_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    achieved_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    achievement_percentage: Mapped[Decimal] = mapped_column(
        Numeric(7, 2),
        default=0,
        comment="achieved_amount / target_amount * 100"
    )
    details: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    employee: Mapped["Employee"] = relationship("Employee")
    company: Mapped["Company"] = relationship("Company")

    __table_args__ = (
        Index('idx_sales_data_employee_date', 'employee_id', 'sale_date'),
    )

    def __repr__(self) -> str:
        return f"<SalesData(employee='{self.employee_id}', date='{self.sale_date}', pct={self.achievement_percentage})>"


class Incentive(Base):
    """Computed incentive for an employee for one month."""
    __tablename__ = "incentives"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_incentive: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=IncentiveStatus.PENDING.value,
        nullable=False,
        comment="pending, approved, paid"
    )
    breakdown: Mapped[Optional[dict]] = mapped_column(
        JSONType,
        nullable=True,
        comment="totalAchieved, totalTarget, percentage, rate"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    employee: Mapped["Employee"] = relationship("Employee")

    __table_args__ = (
        UniqueConstraint('employee_id', 'month', 'year', name='uq_incentive_employee_period'),
    )

    def __repr__(self) -> str:
        return f"<Incentive(employee='{self.employee_id}', period='{self.month}/{self.year}', amount={self.total_incentive})>"
