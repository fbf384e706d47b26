"""
AI Invocation Gateway - the call boundary to the external LLM service

Every operation validates its input, runs one prompt template and returns
a schema-validated result. All operations share the same bounded retry.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Type

from legitmind.core.config import settings
from legitmind.core.exceptions import InvalidModelInput
from legitmind.models.schemas import (
    AnalysisResult,
    AnalyzeInput,
    ChatInput,
    ChatOutput,
    GuidanceInput,
    GuidanceOutput,
    SummarizeInput,
    SummarizeOutput,
)
from legitmind.services.llm_service import (
    ANALYZE_PROMPT,
    CHAT_PROMPT,
    GUIDANCE_PROMPT,
    SUMMARIZE_PROMPT,
    OutputT,
    PromptRunner,
    PromptTemplate,
)
from legitmind.services.retry import retry_async

logger = logging.getLogger(__name__)


def _require_text(value: str, what: str) -> str:
    if not value or not value.strip():
        raise InvalidModelInput(f"{what} must not be empty")
    return value


class AIGateway:
    def __init__(
        self,
        runner: PromptRunner,
        attempts: int = settings.LLM_RETRY_ATTEMPTS,
        delay: float = settings.LLM_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.runner = runner
        self.attempts = attempts
        self.delay = delay
        self.sleep = sleep

    async def _invoke(self, template: PromptTemplate, variables: Dict[str, Any], output_model: Type[OutputT]) -> OutputT:
        logger.info("Running %s", template.name)
        return await retry_async(
            template.name,
            lambda: self.runner.run(template, variables, output_model),
            attempts=self.attempts,
            delay=self.delay,
            sleep=self.sleep,
        )

    async def summarize(self, document_text: str) -> SummarizeOutput:
        request = SummarizeInput(document_text=_require_text(document_text, "Document text"))
        return await self._invoke(SUMMARIZE_PROMPT, request.model_dump(), SummarizeOutput)

    async def analyze(self, document_text: str) -> AnalysisResult:
        """Clauses, obligations and risks; empty lists are a valid answer"""
        request = AnalyzeInput(document_text=_require_text(document_text, "Document text"))
        return await self._invoke(ANALYZE_PROMPT, request.model_dump(), AnalysisResult)

    async def chat(self, document_context: str, question: str) -> ChatOutput:
        """
        Answer a question from the document context.

        The prompt asks the model to reply in the question's language; the
        gateway does not verify it.
        """
        request = ChatInput(
            document_context=_require_text(document_context, "Document context"),
            question=_require_text(question, "Question"),
        )
        return await self._invoke(CHAT_PROMPT, request.model_dump(), ChatOutput)

    async def guidance(self, question: str) -> GuidanceOutput:
        request = GuidanceInput(question=_require_text(question, "Question"))
        return await self._invoke(GUIDANCE_PROMPT, request.model_dump(), GuidanceOutput)
