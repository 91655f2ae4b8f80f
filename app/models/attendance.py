"""Daily attendance records."""
import uuid
from datetime import datetime, date, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Numeric, Date
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.db_types import UUIDType, JSONType

if TYPE_CHECKING:
    from app.models.employee import Employee
    from app.models.organization import Company


class AttendanceStatus(str, Enum):
    """Daily attendance status."""
    PENDING = "pending"
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"


class Attendance(Base):
    """
    Daily attendance record for employees.
    One row per employee per date.
    """
    __tablename__ = "attendance"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Employee & Date
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
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Time tracking
    check_in: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    check_out: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    work_hours: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(4, 2),
        nullable=True,
        comment="check_out - check_in in decimal hours"
    )
    overtime_hours: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 2), nullable=True)

    # Location tracking (JSON: {lat, lng, address})
    check_in_location: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    check_out_location: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=AttendanceStatus.PENDING.value,
        nullable=False,
        comment="pending, present, absent, half_day, on_leave"
    )
    is_late: Mapped[bool] = mapped_column(Boolean, default=False)
    is_locked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        comment="Locked rows can no longer be checked out or edited"
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

    # Relationships
    employee: Mapped["Employee"] = relationship("Employee")
    company: Mapped["Company"] = relationship("Company")

    __table_args__ = (
        UniqueConstraint('employee_id', 'attendance_date', name='uq_attendance_employee_date'),
        Index('idx_attendance_employee', 'employee_id'),
        Index('idx_attendance_date', 'attendance_date'),
    )

    def __repr__(self) -> str:
        return f"<Attendance(employee_id='{self.employee_id}', date='{self.attendance_date}', status='{self.status}')>"
