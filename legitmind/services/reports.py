"""
Reports Service - per-document reports and dashboard statistics
"""

from datetime import datetime, timezone
from typing import List

from legitmind.models.schemas import DashboardStats, DocumentReport
from legitmind.services.document_store import DocumentStore


def build_report(
    store: DocumentStore,
    document_id: str,
    include_summary: bool = True,
    include_analysis: bool = True,
    include_chat: bool = True,
) -> DocumentReport:
    """Collect the stored summary, analysis and chat transcript of one document"""
    document = store.require_document(document_id)
    session = store.get_chat_session(document_id) if include_chat else None

    return DocumentReport(
        document=document,
        generated_at=datetime.now(timezone.utc),
        summary=store.get_summary(document_id) if include_summary else None,
        analysis=store.get_analysis(document_id) if include_analysis else None,
        chat_history=session.messages if session else [],
    )


def render_report_markdown(report: DocumentReport) -> str:
    lines: List[str] = [
        f"# Report: {report.document.name}",
        "",
        f"Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M UTC')}",
        f"Uploaded: {report.document.date} ({report.document.size})",
    ]

    if report.summary:
        lines += ["", "## Executive Summary", "", report.summary.summary]

    if report.analysis:
        result = report.analysis.analysis
        lines += ["", "## Key Clauses", ""]
        lines += [f"- **{c.title}**: {c.description}" for c in result.clauses] or ["_None identified._"]

        lines += ["", "## Party Obligations", ""]
        for o in result.obligations:
            due = f" (due: {o.due_date})" if o.due_date else ""
            lines.append(f"- **{o.party}**: {o.description}{due}")
        if not result.obligations:
            lines.append("_None identified._")

        lines += ["", "## Risks & Mitigations", ""]
        for r in result.risks:
            lines.append(f"- **{r.level} Risk**: {r.description}")
            lines.append(f"  - Mitigation: {r.mitigation}")
        if not result.risks:
            lines.append("_None identified._")

    if report.chat_history:
        lines += ["", "## Chat History", ""]
        for message in report.chat_history:
            speaker = "User" if message.role == "user" else "Assistant"
            lines.append(f"**{speaker}:** {message.content}")
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def dashboard_stats(store: DocumentStore) -> DashboardStats:
    """Counts shown on the dashboard, risks bucketed by level"""
    risk_counts = {"low": 0, "medium": 0, "high": 0}
    clause_count = 0

    for analysis in store.list_analyses():
        clause_count += len(analysis.analysis.clauses)
        for risk in analysis.analysis.risks:
            risk_counts[risk.level.lower()] += 1

    return DashboardStats(
        documents=len(store.list_documents()),
        summaries=len(store.list_summaries()),
        analyses=len(store.list_analyses()),
        chats=len(store.list_chats()),
        clause_count=clause_count,
        risk_counts=risk_counts,
    )
