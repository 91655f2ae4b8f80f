"""Employee model and lifecycle states."""
import uuid
from datetime import datetime, date, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, ForeignKey, Date
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.db_types import UUIDType

if TYPE_CHECKING:
    from app.models.organization import Group, Company, Department, Role
    from app.models.payroll import SalaryStructure


class EmployeeStatus(str, Enum):
    """Employee status in organization."""
    ACTIVE = "active"
    ON_NOTICE = "on_notice"
    ON_LEAVE = "on_leave"
    SUSPENDED = "suspended"
    EXITED = "exited"
    TERMINATED = "terminated"


# TERMINATED is terminal: it is the soft-deleted state and nothing leaves it.
EMPLOYEE_STATUS_TRANSITIONS: dict[str, set[str]] = {
    EmployeeStatus.ACTIVE.value: {
        EmployeeStatus.ON_NOTICE.value, EmployeeStatus.ON_LEAVE.value,
        EmployeeStatus.SUSPENDED.value, EmployeeStatus.EXITED.value,
        EmployeeStatus.TERMINATED.value,
    },
    EmployeeStatus.ON_NOTICE.value: {
        EmployeeStatus.ACTIVE.value, EmployeeStatus.EXITED.value,
        EmployeeStatus.TERMINATED.value,
    },
    EmployeeStatus.ON_LEAVE.value: {
        EmployeeStatus.ACTIVE.value, EmployeeStatus.ON_NOTICE.value,
        EmployeeStatus.TERMINATED.value,
    },
    EmployeeStatus.SUSPENDED.value: {
        EmployeeStatus.ACTIVE.value, EmployeeStatus.EXITED.value,
        EmployeeStatus.TERMINATED.value,
    },
    EmployeeStatus.EXITED.value: {
        EmployeeStatus.TERMINATED.value,
    },
    EmployeeStatus.TERMINATED.value: set(),
}


def can_transition(current: str, target: str) -> bool:
    """Whether an employee may move from `current` to `target` status."""
    if current == target:
        return current != EmployeeStatus.TERMINATED.value
    return target in EMPLOYEE_STATUS_TRANSITIONS.get(current, set())


class Employee(Base):
    """
    Employee record.

    Created by HR onboarding or by the first identity-provider webhook
    (`clerk_id` links the two). Never physically removed: termination moves
    the row to TERMINATED.
    """
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUIDType(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Ownership
    group_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("groups.id", ondelete="SET NULL"),
        nullable=True
    )
    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    department_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True
    )
    role_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True
    )

    # Identification
    employee_code: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        comment="EMP-0001 or EMP-<epoch ms> for webhook-created shells"
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Contact
    personal_email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    work_email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), unique=True, nullable=True)

    # External identity
    clerk_id: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True, index=True)
    profile_picture: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=EmployeeStatus.ACTIVE.value,
        nullable=False,
        index=True,
        comment="active, on_notice, on_leave, suspended, exited, terminated"
    )

    # Reporting
    reporting_manager_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType(as_uuid=True),
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True
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
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    group: Mapped[Optional["Group"]] = relationship("Group")
    company: Mapped[Optional["Company"]] = relationship("Company", back_populates="employees")
    department: Mapped[Optional["Department"]] = relationship(
        "Department",
        foreign_keys=[department_id]
    )
    role: Mapped[Optional["Role"]] = relationship("Role")
    reporting_manager: Mapped[Optional["Employee"]] = relationship(
        "Employee",
        remote_side=[id],
        back_populates="direct_reports"
    )
    direct_reports: Mapped[List["Employee"]] = relationship(
        "Employee",
        back_populates="reporting_manager"
    )
    salary_structures: Mapped[List["SalaryStructure"]] = relationship(
        "SalaryStructure",
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self) -> str:
        return f"<Employee(code='{self.employee_code}', status='{self.status}')>"
