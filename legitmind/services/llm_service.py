"""
LLM Service - prompt templates and the OpenAI-backed prompt runner

A prompt runner takes a named template, the template variables and the
pydantic model the answer must match. It returns a validated instance of
that model or raises ModelInvocationFailed / ModelOutputInvalid.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from legitmind.core.config import settings
from legitmind.core.exceptions import ModelInvocationFailed, ModelOutputInvalid

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    system_prompt: str
    user_prompt: str
    max_tokens: int = 1000
    temperature: float = 0.3
    # variable name -> max characters sent to the model
    truncate: Dict[str, int] = field(default_factory=dict)

    def render(self, variables: Dict[str, Any]) -> str:
        values = {
            key: str(value)[: self.truncate[key]] if key in self.truncate else value
            for key, value in variables.items()
        }
        return self.user_prompt.format(**values)


class PromptRunner(Protocol):
    async def run(
        self, template: PromptTemplate, variables: Dict[str, Any], output_model: Type[OutputT]
    ) -> OutputT: ...


SUMMARIZE_PROMPT = PromptTemplate(
    name="summarizeDocumentPrompt",
    system_prompt="""You are a legal document assistant. Summarize documents, focusing on the key points and main arguments.

Return ONLY valid JSON with this structure:
{
  "summary": "string - a concise summary of the document"
}
""",
    user_prompt="Summarize the following document, focusing on the key points and main arguments:\n\n{document_text}",
    max_tokens=1000,
    truncate={"document_text": 10000},
)

ANALYZE_PROMPT = PromptTemplate(
    name="analyzeDocumentPrompt",
    system_prompt="""You are an expert legal AI. Analyze the document and extract the following information:
- Key Clauses: Identify the most important clauses. For each, provide a short title and a one-sentence description.
- Obligations: Detail the specific obligations of each party involved.
- Risks: Identify any potential risks, red flags, or liabilities, categorizing their severity (Low, Medium, High) and suggesting mitigation strategies.

Return ONLY valid JSON with this structure:
{
  "clauses": [{"title": "string", "description": "string"}],
  "obligations": [{"party": "string", "description": "string", "dueDate": "string or null if not specified"}],
  "risks": [{"level": "Low/Medium/High", "description": "string", "mitigation": "string"}]
}

RULES:
- Use empty lists when the document contains no clauses, obligations or risks
- Do not hallucinate missing values
""",
    user_prompt="Analyze this document:\n---\n{document_text}\n---",
    max_tokens=2000,
    truncate={"document_text": 10000},
)

CHAT_PROMPT = PromptTemplate(
    name="chatWithDocumentPrompt",
    system_prompt="""You are a helpful legal assistant. Your task is to answer questions based on the provided document context.

IMPORTANT: You must identify the language of the user's question (e.g., English, Hindi, Tamil, etc.) and provide your answer in that same language.

Return ONLY valid JSON with this structure:
{
  "answer": "string - the answer, in the same language as the question"
}
""",
    user_prompt=(
        "Document Context:\n---\n{document_context}\n---\n\n"
        "User's Question:\n\"{question}\"\n\n"
        "Based on the document, provide a clear and concise answer to the user's question."
    ),
    max_tokens=800,
    truncate={"document_context": 6000},
)

GUIDANCE_PROMPT = PromptTemplate(
    name="guidanceToolUploadPrompt",
    system_prompt="""You are a helpful assistant guiding the user through a document upload process.
Supported formats are PDF, DOCX and TXT.

Return ONLY valid JSON with this structure:
{
  "answer": "string - no more than two sentences"
}
""",
    user_prompt=(
        "The user has the following question: {question}\n\n"
        "Provide a concise and helpful answer to the user's question. "
        "The answer should be no more than two sentences."
    ),
    max_tokens=200,
)


class OpenAIPromptRunner:
    """Runs prompt templates through OpenAI chat completions in JSON mode"""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = settings.OPENAI_MODEL):
        self._client = client
        self.model = model

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so the app can start without an API key
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT)
        return self._client

    async def run(
        self, template: PromptTemplate, variables: Dict[str, Any], output_model: Type[OutputT]
    ) -> OutputT:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": template.system_prompt},
                    {"role": "user", "content": template.render(variables)},
                ],
                response_format={"type": "json_object"},
                temperature=template.temperature,
                max_tokens=template.max_tokens,
            )
        except OpenAIError as e:
            raise ModelInvocationFailed(f"{template.name}: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ModelOutputInvalid(f"{template.name}: empty response")

        content = response.choices[0].message.content
        try:
            return output_model.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            logger.debug("%s returned non-conforming output: %s", template.name, content)
            raise ModelOutputInvalid(f"{template.name}: {e}") from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
