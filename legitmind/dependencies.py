"""
Store and gateway lifecycle, exposed to routes as FastAPI dependencies
"""

from fastapi import Request

from legitmind.core.config import settings
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore
from legitmind.services.llm_service import OpenAIPromptRunner
from legitmind.services.storage_medium import FileMedium


def create_document_store(storage_dir: str = settings.STORAGE_DIR) -> DocumentStore:
    return DocumentStore(FileMedium(storage_dir)).open()


def create_gateway() -> AIGateway:
    return AIGateway(OpenAIPromptRunner())


def get_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_gateway(request: Request) -> AIGateway:
    return request.app.state.ai_gateway
