"""
Document Service.

Document metadata; file bytes live in Supabase Storage.
"""
import asyncio
import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from app.core.storage import StorageClient
from app.models.document import DocumentRecord, DocumentStatus, DocumentType
from app.models.employee import Employee
from app.models.organization import Company
from app.schemas.document import DocumentCreate


logger = logging.getLogger(__name__)


class DocumentService:
    """Service for document records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _check_owner(self, employee_id: uuid.UUID, company_id: uuid.UUID) -> None:
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

    async def upload_document(self, data: DocumentCreate) -> DocumentRecord:
        """Register a document. Records are marked verified on upload; no content scanning happens."""
        logger.info(f"Uploading document: {data.name} for employee {data.employee_id}")
        await self._check_owner(data.employee_id, data.company_id)

        document = DocumentRecord(
            employee_id=data.employee_id,
            company_id=data.company_id,
            name=data.name,
            type=DocumentType(data.type).value,
            url=data.url,
            status=DocumentStatus.VERIFIED.value,
        )
        self.db.add(document)
        await self.db.flush()
        await self.db.refresh(document)
        return document

    async def upload_file(
        self,
        employee_id: uuid.UUID,
        company_id: uuid.UUID,
        name: str,
        type: DocumentType,
        content: bytes,
        filename: str,
        content_type: str,
    ) -> DocumentRecord:
        """Push bytes to the storage bucket and record the public URL."""
        await self._check_owner(employee_id, company_id)

        path = StorageClient.generate_unique_filename(
            filename,
            prefix=f"companies/{company_id}/employees/{employee_id}"
        )
        # supabase-py is blocking
        url = await asyncio.to_thread(
            StorageClient.upload, content=content, path=path, content_type=content_type
        )
        logger.info(f"Stored {len(content)} bytes at {path}")

        return await self.upload_document(DocumentCreate(
            employee_id=employee_id,
            company_id=company_id,
            name=name,
            type=type,
            url=url,
        ))

    async def get_employee_documents(self, employee_id: uuid.UUID) -> List[DocumentRecord]:
        result = await self.db.execute(
            select(DocumentRecord)
            .where(DocumentRecord.employee_id == employee_id)
            .order_by(DocumentRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_company_documents(self, company_id: uuid.UUID) -> List[DocumentRecord]:
        result = await self.db.execute(
            select(DocumentRecord)
            .options(selectinload(DocumentRecord.employee))
            .where(DocumentRecord.company_id == company_id)
            .order_by(DocumentRecord.created_at.desc())
        )
        return list(result.scalars().all())
