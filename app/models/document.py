"""Document metadata records."""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy import Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.db_types import UUIDType

if TYPE_CHECKING:
    from app.models.employee import Employee
    from app.models.organization import Company


class DocumentType(str, Enum):
    """Kind of document held for an employee."""
    PAYSLIP = "payslip"
    ID_PROOF = "id_proof"
    CONTRACT = "contract"
    OTHER = "other"


class DocumentStatus(str, Enum):
    """Verification state of a document."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class DocumentRecord(Base):
    """
    Metadata for a file held in object storage.
    Only the URL is kept here; the bytes live in the storage bucket.
    """
    __tablename__ = "documents"

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

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        comment="payslip, id_proof, contract, other"
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DocumentStatus.PENDING.value,
        nullable=False,
        comment="pending, verified, rejected"
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
    company: Mapped["Company"] = relationship("Company")

    __table_args__ = (
        Index('idx_documents_company', 'company_id'),
        Index('idx_documents_employee', 'employee_id'),
    )

    def __repr__(self) -> str:
        return f"<DocumentRecord(name='{self.name}', type='{self.type}', status='{self.status}')>"
