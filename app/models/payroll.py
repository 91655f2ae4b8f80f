"""Salary structures and monthly payroll runs."""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy import Table, Column, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.db_types import UUIDType, JSONType

if TYPE_CHECKING:
    from app.models.employee import Employee
    from app.models.organization import Company


class PayrollStatus(str, Enum):
    """Payroll run status."""
    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"


# Employees included in a payroll run
payroll_run_employees = Table(
    "payroll_run_employees",
    Base.metadata,
    Column(
        "payroll_run_id",
        UUIDType(as_uuid=True),
        ForeignKey("payroll_runs.id", ondelete="CASCADE"),
        primary_key=True
    ),
    Column(
        "employee_id",
        UUIDType(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True
    ),
)


class SalaryStructure(Base):
    """
    Employee salary structure (monthly CTC breakdown).
    Only one structure per employee is active at a time.
    """
    __tablename__ = "salary_structures"

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
    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True
    )

    # Earnings
    basic: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    hra: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    conveyance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    medical: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    special_allowance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)

    # Statutory contributions
    pf_employee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    pf_employer: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    esi_employee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    esi_employer: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    pt: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, comment="Professional tax")

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

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

    employee: Mapped["Employee"] = relationship("Employee", back_populates="salary_structures")

    __table_args__ = (
        Index('idx_salary_structures_employee', 'employee_id', 'is_active'),
    )

    def __repr__(self) -> str:
        return f"<SalaryStructure(employee_id='{self.employee_id}', basic={self.basic}, active={self.is_active})>"


class PayrollRun(Base):
    """
    Monthly payroll processing record for a company.
    One run per company per month; re-processing updates it in place.
    """
    __tablename__ = "payroll_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-12")
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=PayrollStatus.DRAFT.value,
        nullable=False,
        comment="draft, processed, paid"
    )
    total_payout: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=0)
    stats: Mapped[Optional[dict]] = mapped_column(
        JSONType,
        nullable=True,
        comment="headCount, totalGross, totalDeductions, results"
    )

    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

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

    # Relationships
    company: Mapped["Company"] = relationship("Company")
    employees: Mapped[List["Employee"]] = relationship(
        "Employee",
        secondary=payroll_run_employees
    )

    __table_args__ = (
        UniqueConstraint('company_id', 'month', 'year', name='uq_payroll_company_period'),
    )

    def __repr__(self) -> str:
        return f"<PayrollRun(company='{self.company_id}', period='{self.month}/{self.year}', status='{self.status}')>"
