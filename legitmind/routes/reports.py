"""
Reports & Dashboard Routes
"""

from typing import Literal

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from legitmind.dependencies import get_store
from legitmind.models.schemas import DashboardStats, DocumentReport
from legitmind.services.document_store import DocumentStore
from legitmind.services.reports import build_report, dashboard_stats, render_report_markdown

router = APIRouter()


@router.get("/documents/{document_id}/report", response_model=DocumentReport)
def document_report(
    document_id: str,
    include_summary: bool = True,
    include_analysis: bool = True,
    include_chat: bool = True,
    format: Literal["json", "markdown"] = "json",
    store: DocumentStore = Depends(get_store),
):
    """Summary, analysis and chat transcript of one document, as JSON or Markdown"""
    report = build_report(store, document_id, include_summary, include_analysis, include_chat)
    if format == "markdown":
        return PlainTextResponse(render_report_markdown(report), media_type="text/markdown")
    return report


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(store: DocumentStore = Depends(get_store)):
    return dashboard_stats(store)
