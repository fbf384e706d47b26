"""
Pydantic schemas for the LegitMind document service
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional, Dict
from datetime import datetime


DocumentType = Literal["pdf", "docx", "txt"]
RiskLevel = Literal["Low", "Medium", "High"]
ChatRole = Literal["user", "assistant"]


# ----------- Stored entities -----------

class Document(BaseModel):
    id: str
    name: str
    size: str
    date: str
    type: DocumentType = "txt"
    content: Optional[str] = Field(default=None, exclude=True)


class Clause(BaseModel):
    title: str = Field(description="A short, descriptive title for the clause.")
    description: str = Field(description="A one-sentence explanation of what the clause entails.")


class Obligation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    party: str = Field(description="The party responsible for the obligation (e.g., 'Tenant', 'Landlord').")
    description: str = Field(description="A clear and concise description of the obligation.")
    due_date: Optional[str] = Field(
        default=None,
        alias="dueDate",
        description="The due date for the obligation, if specified (e.g., 'Within 30 days of signing').",
    )


class Risk(BaseModel):
    level: RiskLevel = Field(description="The severity level of the risk.")
    description: str = Field(description="A description of the potential risk and its implications.")
    mitigation: str = Field(description="A suggested action to mitigate or address the risk.")


class AnalysisResult(BaseModel):
    clauses: List[Clause] = []
    obligations: List[Obligation] = []
    risks: List[Risk] = []


class Summary(BaseModel):
    id: str
    doc_id: str
    doc_name: str
    summary: str
    date: str


class Analysis(BaseModel):
    id: str
    doc_id: str
    doc_name: str
    analysis: AnalysisResult
    date: str


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class ChatSession(BaseModel):
    doc_id: str
    doc_name: str
    messages: List[ChatMessage] = []
    last_updated: datetime


# ----------- Gateway inputs / outputs -----------

class SummarizeInput(BaseModel):
    document_text: str


class SummarizeOutput(BaseModel):
    summary: str = Field(description="A concise summary of the document.")


class AnalyzeInput(BaseModel):
    document_text: str


class ChatInput(BaseModel):
    document_context: str
    question: str


class ChatOutput(BaseModel):
    answer: str = Field(description="The answer to the user question, in the same language as the question.")


class GuidanceInput(BaseModel):
    question: str


class GuidanceOutput(BaseModel):
    answer: str = Field(description="The answer to the user question.")


# ----------- API requests / responses -----------

class DocumentUploadResponse(BaseModel):
    document: Document
    pages: int
    status: str
    extracted_text_length: int


class DocumentContentResponse(BaseModel):
    document_id: str
    content: str


class ChatRequest(BaseModel):
    question: str


class ChatResponse(BaseModel):
    answer: str
    session: ChatSession


class GuidanceRequest(BaseModel):
    question: str


class DocumentReport(BaseModel):
    document: Document
    generated_at: datetime
    summary: Optional[Summary] = None
    analysis: Optional[Analysis] = None
    chat_history: List[ChatMessage] = []


class DashboardStats(BaseModel):
    documents: int
    summaries: int
    analyses: int
    chats: int
    clause_count: int
    risk_counts: Dict[str, int]
