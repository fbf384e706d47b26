"""
Document Upload & Management Routes
"""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from legitmind.core.config import settings
from legitmind.core.exceptions import ContentUnavailable, LegitMindError
from legitmind.dependencies import get_store
from legitmind.models.schemas import Document, DocumentContentResponse, DocumentUploadResponse
from legitmind.services.document_store import DocumentStore, make_document_id
from legitmind.services.text_extraction import extract_text, file_extension, size_label

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=DocumentUploadResponse, status_code=201)
async def upload_document(file: UploadFile = File(...), store: DocumentStore = Depends(get_store)):
    """
    Upload a document (PDF, DOCX, TXT)
    Extracts text and stores metadata and content
    """
    if not file or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    extension = file_extension(file.filename)
    if extension not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type. Allowed: {', '.join(sorted(settings.ALLOWED_EXTENSIONS))}"
        )

    file_bytes = await file.read()

    if len(file_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(file_bytes) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        extracted_text, page_count = extract_text(file_bytes, file.filename)
    except LegitMindError:
        raise
    except Exception as e:
        logger.exception("Text extraction failed for %s", file.filename)
        raise HTTPException(status_code=400, detail=f"Could not read the file content: {e}")

    if not extracted_text.strip():
        raise HTTPException(status_code=400, detail="Could not extract any text from document")

    now = datetime.now(timezone.utc)
    document = Document(
        id=make_document_id(file.filename, now),
        name=file.filename,
        size=size_label(len(file_bytes)),
        date=now.date().isoformat(),
        type=extension,
        content=extracted_text,
    )
    stored = store.add_document(document)

    return DocumentUploadResponse(
        document=stored,
        pages=page_count,
        status="processed",
        extracted_text_length=len(extracted_text),
    )


@router.get("", response_model=List[Document])
def list_documents(store: DocumentStore = Depends(get_store)):
    return store.list_documents()


@router.get("/{document_id}", response_model=Document)
def get_document(document_id: str, store: DocumentStore = Depends(get_store)):
    return store.require_document(document_id)


@router.get("/{document_id}/content", response_model=DocumentContentResponse)
def get_document_content(document_id: str, store: DocumentStore = Depends(get_store)):
    content = store.get_content(document_id)
    if content is None:
        raise ContentUnavailable(document_id)
    return DocumentContentResponse(document_id=document_id, content=content)


@router.delete("/{document_id}", status_code=204)
async def delete_document(document_id: str, store: DocumentStore = Depends(get_store)):
    """Delete a document with its summary, analysis and chat; unknown ids are ignored"""
    async with store.lock_for(document_id):
        store.delete_document(document_id)
    return Response(status_code=204)
