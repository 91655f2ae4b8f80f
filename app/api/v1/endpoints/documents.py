"""API endpoints for employee documents."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, UploadFile, File, Form, HTTPException, status

from app.api.deps import DB
from app.models.document import DocumentType
from app.schemas.document import DocumentCreate, DocumentResponse, DocumentWithEmployeeResponse
from app.services.document_service import DocumentService


router = APIRouter()


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(data: DocumentCreate, db: DB):
    """Register a document whose file is already stored at `url`."""
    return await DocumentService(db).upload_document(data)


@router.post("/upload-file", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document_file(
    db: DB,
    file: UploadFile = File(..., description="Document file to upload"),
    employee_id: UUID = Form(...),
    company_id: UUID = Form(...),
    name: str = Form(..., min_length=1, max_length=255),
    type: DocumentType = Form(DocumentType.OTHER),
):
    """
    Upload a document file to storage and register it.

    The stored file's public URL is saved on the record.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        return await DocumentService(db).upload_file(
            employee_id=employee_id,
            company_id=company_id,
            name=name,
            type=type,
            content=content,
            filename=file.filename or "document",
            content_type=file.content_type or "application/octet-stream",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/employee/{employee_id}", response_model=List[DocumentResponse])
async def get_employee_documents(employee_id: UUID, db: DB):
    return await DocumentService(db).get_employee_documents(employee_id)


@router.get("/company/{company_id}", response_model=List[DocumentWithEmployeeResponse])
async def get_company_documents(company_id: UUID, db: DB):
    """All documents of a company, each with its employee."""
    return await DocumentService(db).get_company_documents(company_id)
