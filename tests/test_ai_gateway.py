import pytest

from conftest import FakeRunner
from legitmind.core.exceptions import (
    InvalidModelInput,
    ModelInvocationFailed,
    ModelOutputInvalid,
    ModelOverloaded,
)
from legitmind.models.schemas import AnalysisResult
from legitmind.services.ai_gateway import AIGateway
from legitmind.services.retry import retry_async

ANALYSIS = {
    "clauses": [{"title": "Term", "description": "The lease runs for 12 months."}],
    "obligations": [{"party": "Tenant", "description": "Pay rent monthly.", "dueDate": "1st of each month"}],
    "risks": [{"level": "High", "description": "Uncapped liability.", "mitigation": "Negotiate a cap."}],
}


def make_gateway(outcomes, fake_sleep, default=None):
    runner = FakeRunner(outcomes, default=default)
    return AIGateway(runner, attempts=3, delay=1.0, sleep=fake_sleep), runner


async def test_analyze_recovers_after_two_failures(fake_sleep, sleeps):
    gateway, runner = make_gateway(
        [ModelInvocationFailed("503"), ModelInvocationFailed("503"), ANALYSIS], fake_sleep
    )

    result = await gateway.analyze("The tenant shall pay rent.")

    assert isinstance(result, AnalysisResult)
    assert result.obligations[0].due_date == "1st of each month"
    assert len(runner.calls) == 3
    assert sleeps == [1.0, 1.0]


async def test_analyze_gives_up_after_three_attempts(fake_sleep, sleeps):
    cause = ModelInvocationFailed("service unavailable")
    gateway, runner = make_gateway([], fake_sleep, default=cause)

    with pytest.raises(ModelOverloaded) as excinfo:
        await gateway.analyze("The tenant shall pay rent.")

    assert len(runner.calls) == 3
    # two 1000 ms waits between three attempts
    assert sleeps == [1.0, 1.0]
    assert excinfo.value.__cause__ is cause
    assert excinfo.value.attempts == 3


async def test_analyze_with_no_obligations_is_not_an_error(fake_sleep):
    gateway, _ = make_gateway([{"clauses": [], "obligations": [], "risks": []}], fake_sleep)

    result = await gateway.analyze("Just a note.")

    assert result.obligations == []


async def test_invalid_output_is_retried(fake_sleep, sleeps):
    gateway, runner = make_gateway(
        [ModelOutputInvalid("missing 'summary'"), {"summary": "Short."}], fake_sleep
    )

    result = await gateway.summarize("Some text")

    assert result.summary == "Short."
    assert sleeps == [1.0]


@pytest.mark.parametrize("operation, args", [
    ("summarize", ("text",)),
    ("chat", ("context", "question?")),
    ("guidance", ("How do I upload?",)),
])
async def test_every_operation_shares_the_retry_policy(operation, args, fake_sleep, sleeps):
    gateway, runner = make_gateway([], fake_sleep, default=ModelInvocationFailed("down"))

    with pytest.raises(ModelOverloaded):
        await getattr(gateway, operation)(*args)

    assert len(runner.calls) == 3
    assert sleeps == [1.0, 1.0]


@pytest.mark.parametrize("operation, args", [
    ("summarize", ("   ",)),
    ("analyze", ("",)),
    ("chat", ("", "question")),
    ("chat", ("context", " ")),
    ("guidance", ("",)),
])
async def test_empty_input_is_rejected_without_calling_the_model(operation, args, fake_sleep):
    gateway, runner = make_gateway([], fake_sleep)

    with pytest.raises(InvalidModelInput):
        await getattr(gateway, operation)(*args)

    assert runner.calls == []


async def test_chat_sends_context_and_question(fake_sleep):
    gateway, runner = make_gateway([{"answer": "Le locataire."}], fake_sleep)

    result = await gateway.chat("The tenant pays rent.", "Qui paie le loyer ?")

    assert result.answer == "Le locataire."
    assert runner.calls[0]["template"] == "chatWithDocumentPrompt"
    assert runner.calls[0]["variables"] == {
        "document_context": "The tenant pays rent.",
        "question": "Qui paie le loyer ?",
    }


async def test_non_transient_errors_are_not_retried(fake_sleep, sleeps):
    calls = []

    async def boom():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await retry_async("op", boom, attempts=3, delay=1.0, sleep=fake_sleep)

    assert calls == [1]
    assert sleeps == []


async def test_retry_rejects_zero_attempts(fake_sleep):
    async def ok():
        return 1

    with pytest.raises(ValueError):
        await retry_async("op", ok, attempts=0, sleep=fake_sleep)
