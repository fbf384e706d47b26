"""
LegitMind Document Service - Main FastAPI Application
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from legitmind.core.config import settings
from legitmind.core.exceptions import LegitMindError
from legitmind.core.logger import logger
from legitmind.dependencies import create_document_store, create_gateway
from legitmind.routes import analysis, chat, documents, guidance, reports, summary
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore

VERSION = "1.0.0"


async def legitmind_error_handler(request: Request, exc: LegitMindError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app(store: Optional[DocumentStore] = None, gateway: Optional[AIGateway] = None) -> FastAPI:
    """Build the application; tests pass their own store and gateway"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.document_store = store or create_document_store()
        app.state.ai_gateway = gateway or create_gateway()
        logger.info("%s started", settings.APP_NAME)
        try:
            yield
        finally:
            app.state.document_store.close()
            close_runner = getattr(app.state.ai_gateway.runner, "close", None)
            if close_runner is not None:
                await close_runner()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Document upload, AI summaries and analyses, and chat with document content",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LegitMindError, legitmind_error_handler)

    # Include routers
    api = settings.API_V1_STR
    app.include_router(documents.router, prefix=f"{api}/documents", tags=["Documents"])
    app.include_router(summary.router, prefix=api, tags=["Summary"])
    app.include_router(analysis.router, prefix=api, tags=["Analysis"])
    app.include_router(chat.router, prefix=api, tags=["Chat"])
    app.include_router(guidance.router, prefix=api, tags=["Guidance"])
    app.include_router(reports.router, prefix=api, tags=["Reports"])

    @app.get("/")
    def root():
        """Health check and API information"""
        return {
            "status": "running",
            "service": settings.APP_NAME,
            "version": VERSION,
            "endpoints": {
                "upload": f"{api}/documents/upload",
                "documents": f"{api}/documents",
                "summary": f"{api}/documents/{{document_id}}/summary",
                "analysis": f"{api}/documents/{{document_id}}/analysis",
                "chat": f"{api}/documents/{{document_id}}/chat",
                "guidance": f"{api}/guidance",
                "report": f"{api}/documents/{{document_id}}/report",
                "dashboard": f"{api}/dashboard",
            }
        }

    @app.get("/health")
    def health_check():
        """Simple health check"""
        return {"status": "healthy"}

    return app


app = create_app()
