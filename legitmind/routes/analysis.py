"""
Document Analysis Routes - clauses, obligations and risks
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from legitmind.dependencies import get_gateway, get_store
from legitmind.models.schemas import Analysis
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore, make_record_id, today

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/documents/{document_id}/analysis", response_model=Analysis)
async def analyze_document(
    document_id: str,
    store: DocumentStore = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Extract key clauses, party obligations and risks
    Replaces any previous analysis of the same document
    """
    document = store.require_document(document_id)
    text = store.require_content(document_id)

    logger.info("Analyzing document %s", document_id)
    result = await gateway.analyze(text)

    return store.put_analysis(Analysis(
        id=make_record_id("ana"),
        doc_id=document.id,
        doc_name=document.name,
        analysis=result,
        date=today(),
    ))


@router.get("/documents/{document_id}/analysis", response_model=Analysis)
def get_analysis(document_id: str, store: DocumentStore = Depends(get_store)):
    analysis = store.get_analysis(document_id)
    if analysis is None:
        raise HTTPException(status_code=404, detail=f"No analysis for document {document_id}")
    return analysis


@router.get("/analyses", response_model=List[Analysis])
def list_analyses(store: DocumentStore = Depends(get_store)):
    return store.list_analyses()
