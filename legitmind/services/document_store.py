"""
Document Storage Service - in-memory collections with write-through persistence

The store owns four collections (documents, summaries, analyses, chat
sessions) and is their only mutator. Every mutation serializes and writes the
affected keys first and only then updates memory, so what callers read always
matches the last durable state.
"""

import asyncio
import json
import logging
import re
import uuid
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from legitmind.core.exceptions import ContentUnavailable, DocumentNotFound, StoragePersistFailed
from legitmind.models.schemas import Analysis, ChatMessage, ChatSession, Document, Summary
from legitmind.services.storage_medium import StorageMedium

logger = logging.getLogger(__name__)

FILES_KEY = "files"
CONTENT_KEY_PREFIX = "file-content-"
SUMMARIES_KEY = "summaries"
ANALYSES_KEY = "analyses"
CHATS_KEY = "chats"

ModelT = TypeVar("ModelT", bound=BaseModel)


def make_document_id(name: str, now: Optional[datetime] = None) -> str:
    """Client-style id from the upload timestamp and the file name"""
    now = now or datetime.now(timezone.utc)
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:40] or "document"
    return f"{now.strftime('%Y-%m-%dT%H:%M:%S.%f')}Z-{slug}"


def make_record_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def today() -> str:
    return date.today().isoformat()


def content_key(document_id: str) -> str:
    return f"{CONTENT_KEY_PREFIX}{document_id}"


class DocumentStore:
    """Durable CRUD over documents, summaries, analyses and chat sessions"""

    def __init__(self, medium: StorageMedium):
        self.medium = medium
        self.documents: Dict[str, Document] = {}
        self.summaries: List[Summary] = []
        self.analyses: List[Analysis] = []
        self.chats: Dict[str, ChatSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    # ----------- Lifecycle -----------

    def open(self) -> "DocumentStore":
        """Hydrate every collection from the medium"""
        self.documents = {doc.id: doc for doc in self._load_list(FILES_KEY, Document)}
        self.summaries = self._load_list(SUMMARIES_KEY, Summary)
        self.analyses = self._load_list(ANALYSES_KEY, Analysis)
        self.chats = {session.doc_id: session for session in self._load_list(CHATS_KEY, ChatSession)}

        logger.info(
            "Document store opened: %d documents, %d summaries, %d analyses, %d chats",
            len(self.documents), len(self.summaries), len(self.analyses), len(self.chats),
        )
        return self

    def close(self) -> None:
        """Writes are write-through, so closing only releases per-document locks"""
        self._locks.clear()
        logger.info("Document store closed")

    def _load_list(self, key: str, model: Type[ModelT]) -> List[ModelT]:
        try:
            raw = self.medium.get(key)
            if raw is None:
                return []
            return [model.model_validate(item) for item in json.loads(raw)]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error("Error loading '%s', starting empty: %s", key, e)
            return []

    # ----------- Medium writes -----------

    def _persist(self, key: str, value: str) -> None:
        try:
            self.medium.set(key, value)
        except Exception as e:
            logger.error("Could not persist '%s': %s", key, e)
            raise StoragePersistFailed(key, str(e)) from e

    def _persist_list(self, key: str, items: List[BaseModel]) -> None:
        try:
            payload = json.dumps([item.model_dump(mode="json") for item in items])
        except (TypeError, ValueError) as e:
            logger.error("Could not serialize '%s': %s", key, e)
            raise StoragePersistFailed(key, str(e)) from e
        self._persist(key, payload)

    def _remove(self, key: str) -> None:
        try:
            self.medium.remove(key)
        except Exception as e:
            logger.error("Could not remove '%s': %s", key, e)
            raise StoragePersistFailed(key, str(e)) from e

    # ----------- Documents -----------

    def add_document(self, doc: Document) -> Document:
        """Insert document metadata, and its content under its own key when present"""
        if not doc.id or not doc.name:
            raise ValueError("Document id and name are required")

        documents = dict(self.documents)
        documents[doc.id] = doc.model_copy(update={"content": None})

        if doc.content is not None:
            self._persist(content_key(doc.id), doc.content)
        try:
            self._persist_list(FILES_KEY, list(documents.values()))
        except StoragePersistFailed:
            if doc.content is not None and doc.id not in self.documents:
                self._discard_orphan_content(doc.id)
            raise

        self.documents = documents
        logger.info("Added document %s (%s)", doc.id, doc.name)
        return documents[doc.id]

    def _discard_orphan_content(self, document_id: str) -> None:
        try:
            self.medium.remove(content_key(document_id))
        except Exception as e:
            logger.warning("Could not discard content of unsaved document %s: %s", document_id, e)

    def delete_document(self, document_id: str) -> bool:
        """
        Delete a document and cascade to its summary, analysis and chat session.

        Dependents go first and metadata last, so an interrupted delete never
        leaves a dependent pointing at a missing document. Unknown ids are a no-op.
        """
        if document_id not in self.documents:
            return False

        summaries = [s for s in self.summaries if s.doc_id != document_id]
        if len(summaries) != len(self.summaries):
            self._persist_list(SUMMARIES_KEY, summaries)
            self.summaries = summaries

        analyses = [a for a in self.analyses if a.doc_id != document_id]
        if len(analyses) != len(self.analyses):
            self._persist_list(ANALYSES_KEY, analyses)
            self.analyses = analyses

        if document_id in self.chats:
            chats = {k: v for k, v in self.chats.items() if k != document_id}
            self._persist_list(CHATS_KEY, list(chats.values()))
            self.chats = chats

        self._remove(content_key(document_id))

        documents = {k: v for k, v in self.documents.items() if k != document_id}
        self._persist_list(FILES_KEY, list(documents.values()))
        self.documents = documents

        lock = self._locks.get(document_id)
        if lock is not None and not lock.locked():
            del self._locks[document_id]

        logger.info("Deleted document %s", document_id)
        return True

    def get_document(self, document_id: str) -> Optional[Document]:
        return self.documents.get(document_id)

    def require_document(self, document_id: str) -> Document:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFound(document_id)
        return document

    def get_content(self, document_id: str) -> Optional[str]:
        """Raw text of a document, or None when it was never stored, deleted, or unreadable"""
        try:
            return self.medium.get(content_key(document_id))
        except Exception as e:
            logger.error("Could not read content of %s: %s", document_id, e)
            return None

    def require_content(self, document_id: str) -> str:
        content = self.get_content(document_id)
        if not content:
            raise ContentUnavailable(document_id)
        return content

    def list_documents(self) -> List[Document]:
        return list(self.documents.values())

    # ----------- Summaries & analyses -----------

    def put_summary(self, summary: Summary) -> Summary:
        """Store a summary on top, replacing any previous summary of the same document"""
        self.require_document(summary.doc_id)
        summaries = [summary] + [s for s in self.summaries if s.doc_id != summary.doc_id]
        self._persist_list(SUMMARIES_KEY, summaries)
        self.summaries = summaries
        return summary

    def get_summary(self, document_id: str) -> Optional[Summary]:
        return next((s for s in self.summaries if s.doc_id == document_id), None)

    def list_summaries(self) -> List[Summary]:
        return list(self.summaries)

    def put_analysis(self, analysis: Analysis) -> Analysis:
        """Same replace-on-top policy as summaries"""
        self.require_document(analysis.doc_id)
        analyses = [analysis] + [a for a in self.analyses if a.doc_id != analysis.doc_id]
        self._persist_list(ANALYSES_KEY, analyses)
        self.analyses = analyses
        return analysis

    def get_analysis(self, document_id: str) -> Optional[Analysis]:
        return next((a for a in self.analyses if a.doc_id == document_id), None)

    def list_analyses(self) -> List[Analysis]:
        return list(self.analyses)

    # ----------- Chat sessions -----------

    def append_chat_message(self, document_id: str, doc_name: str, message: ChatMessage) -> ChatSession:
        """Append to the document's session, creating it on the first message"""
        self.require_document(document_id)
        now = datetime.now(timezone.utc)

        session = self.chats.get(document_id)
        if session is None:
            session = ChatSession(doc_id=document_id, doc_name=doc_name, messages=[message], last_updated=now)
        else:
            session = session.model_copy(update={"messages": session.messages + [message], "last_updated": now})

        chats = dict(self.chats)
        chats[document_id] = session
        self._persist_list(CHATS_KEY, list(chats.values()))
        self.chats = chats
        return session

    def get_chat_session(self, document_id: str) -> Optional[ChatSession]:
        return self.chats.get(document_id)

    def clear_chat(self, document_id: str) -> Optional[ChatSession]:
        """Empty the transcript but keep the session; no session is a no-op"""
        session = self.chats.get(document_id)
        if session is None:
            return None

        session = session.model_copy(update={"messages": [], "last_updated": datetime.now(timezone.utc)})
        chats = dict(self.chats)
        chats[document_id] = session
        self._persist_list(CHATS_KEY, list(chats.values()))
        self.chats = chats
        return session

    def list_chats(self) -> List[ChatSession]:
        return list(self.chats.values())

    # ----------- Write ordering -----------

    def lock_for(self, document_id: str) -> asyncio.Lock:
        """Single-writer lock for a document's multi-step flows (chat send)"""
        lock = self._locks.get(document_id)
        if lock is None:
            lock = self._locks[document_id] = asyncio.Lock()
        return lock
