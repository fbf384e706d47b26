"""
Document Summary Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from legitmind.dependencies import get_gateway, get_store
from legitmind.models.schemas import Summary
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore, make_record_id, today

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/documents/{document_id}/summary", response_model=Summary)
async def summarize_document(
    document_id: str,
    store: DocumentStore = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Generate a summary for the document
    Replaces any previous summary of the same document
    """
    document = store.require_document(document_id)
    text = store.require_content(document_id)

    logger.info("Summarizing document %s", document_id)
    result = await gateway.summarize(text)

    return store.put_summary(Summary(
        id=make_record_id("sum"),
        doc_id=document.id,
        doc_name=document.name,
        summary=result.summary,
        date=today(),
    ))


@router.get("/documents/{document_id}/summary", response_model=Summary)
def get_summary(document_id: str, store: DocumentStore = Depends(get_store)):
    summary = store.get_summary(document_id)
    if summary is None:
        raise HTTPException(status_code=404, detail=f"No summary for document {document_id}")
    return summary


@router.get("/summaries", response_model=List[Summary])
def list_summaries(store: DocumentStore = Depends(get_store)):
    """Most recent first"""
    return store.list_summaries()
