"""
Chat with Document Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from legitmind.core.exceptions import LegitMindError, StoragePersistFailed
from legitmind.dependencies import get_gateway, get_store
from legitmind.models.schemas import ChatMessage, ChatRequest, ChatResponse, ChatSession
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/documents/{document_id}/chat", response_model=ChatResponse)
async def chat_with_document(
    document_id: str,
    request: ChatRequest,
    store: DocumentStore = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Ask a question about the document
    The question and the answer are appended to the document's chat session
    """
    document = store.require_document(document_id)
    text = store.require_content(document_id)

    if not request.question or not request.question.strip():
        raise HTTPException(status_code=400, detail="Question must not be empty")

    # One send at a time per document keeps the transcript in send order
    async with store.lock_for(document_id):
        store.append_chat_message(document.id, document.name, ChatMessage(role="user", content=request.question))
        try:
            result = await gateway.chat(text, request.question)
        except LegitMindError as e:
            logger.warning("Chat failed for document %s: %s", document_id, e.detail)
            try:
                store.append_chat_message(
                    document.id, document.name,
                    ChatMessage(role="assistant", content=f"I'm sorry, an error occurred: {e.detail}"),
                )
            except StoragePersistFailed as persist_error:
                logger.error("Could not record chat failure for %s: %s", document_id, persist_error.detail)
            raise e
        session = store.append_chat_message(
            document.id, document.name, ChatMessage(role="assistant", content=result.answer)
        )

    return ChatResponse(answer=result.answer, session=session)


@router.get("/documents/{document_id}/chat", response_model=ChatSession)
def get_chat_session(document_id: str, store: DocumentStore = Depends(get_store)):
    session = store.get_chat_session(document_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No chat session for document {document_id}")
    return session


@router.delete("/documents/{document_id}/chat", response_model=ChatSession)
async def clear_chat(document_id: str, store: DocumentStore = Depends(get_store)):
    """Empty the transcript, keeping the session; waits for a pending send to finish"""
    async with store.lock_for(document_id):
        session = store.clear_chat(document_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No chat session for document {document_id}")
    return session


@router.get("/chats", response_model=List[ChatSession])
def list_chats(store: DocumentStore = Depends(get_store)):
    return store.list_chats()
