import inspect
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from legitmind.main import create_app
from legitmind.models.schemas import Document
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.document_store import DocumentStore
from legitmind.services.storage_medium import MemoryMedium


class FakeRunner:
    """
    Prompt runner returning scripted outcomes in order.

    An outcome is an exception (raised), a dict (validated into the output
    model) or a callable receiving the template variables. When the script
    runs out, ``default`` is used.
    """

    def __init__(self, outcomes: Optional[List[Any]] = None, default: Any = None):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    async def run(self, template, variables, output_model):
        self.calls.append({"template": template.name, "variables": dict(variables)})
        outcome = self.outcomes.pop(0) if self.outcomes else self.default

        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            outcome = outcome(variables)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        if isinstance(outcome, dict):
            return output_model.model_validate(outcome)
        return outcome


class FailingMedium(MemoryMedium):
    """Memory medium whose writes fail for selected keys"""

    def __init__(self, fail_keys=(), initial=None):
        super().__init__(initial)
        self.fail_keys = set(fail_keys)

    def set(self, key: str, value: str) -> None:
        if key in self.fail_keys or "*" in self.fail_keys:
            raise OSError("QuotaExceededError: storage is full")
        super().set(key, value)


@pytest.fixture
def medium() -> MemoryMedium:
    return MemoryMedium()


@pytest.fixture
def store(medium) -> DocumentStore:
    return DocumentStore(medium).open()


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps) -> Callable:
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)
    return _sleep


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def gateway(runner, fake_sleep) -> AIGateway:
    return AIGateway(runner, attempts=3, delay=1.0, sleep=fake_sleep)


@pytest.fixture
def client(store, gateway):
    with TestClient(create_app(store=store, gateway=gateway)) as test_client:
        yield test_client


def make_document(doc_id: str = "doc-1", name: str = "lease.txt", content: Optional[str] = "Hello World") -> Document:
    return Document(id=doc_id, name=name, size="0.01 KB", date="2024-05-01", type="txt", content=content)
