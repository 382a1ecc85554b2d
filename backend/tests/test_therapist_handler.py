"""Tests for the therapist chat handler with faked collaborators."""

import pytest

from mindfulspace.config import Settings
from mindfulspace.errors import (
    ConfigurationError,
    GatewayFailureError,
    RateLimitedError,
    ServiceUnavailableError,
)
from mindfulspace.models.messages import MessageRole
from mindfulspace.models.therapist import ChatRequest, SummaryRequest
from mindfulspace.safety import CRISIS_MESSAGE
from mindfulspace.services.therapist import TherapistChatHandler


def _chat(*contents: str, session_id: str | None = "s-1") -> ChatRequest:
    turns = []
    for i, content in enumerate(contents):
        role = "user" if i % 2 == 0 else "assistant"
        turns.append({"role": role, "content": content})
    return ChatRequest(type="chat", messages=turns, session_id=session_id)


@pytest.fixture
def handler(settings, gateway, store, persona) -> TherapistChatHandler:
    return TherapistChatHandler(settings, gateway, store, persona)


@pytest.mark.asyncio
async def test_chat_returns_gateway_reply_verbatim(handler, gateway, store, persona) -> None:
    gateway.reply = "  It makes sense you'd feel that way.\n"

    result = await handler.handle(_chat("Work has been overwhelming."))

    assert result.message == "  It makes sense you'd feel that way.\n"
    assert result.is_crisis is False
    assert gateway.calls[0][0] == {"role": "system", "content": persona.chat_prompt}
    assert gateway.calls[0][-1] == {
        "role": "user",
        "content": "Work has been overwhelming.",
    }


@pytest.mark.asyncio
async def test_chat_persists_exactly_one_assistant_message(handler, gateway, store) -> None:
    result = await handler.handle(_chat("hello", "hi there", "I feel low", session_id="abc"))

    assert len(store.inserts) == 1
    saved = store.inserts[0]
    assert saved.session_id == "abc"
    assert saved.role == MessageRole.ASSISTANT
    assert saved.content == result.message


@pytest.mark.asyncio
async def test_chat_without_session_does_not_persist(handler, store) -> None:
    await handler.handle(_chat("hello", session_id=None))

    assert store.inserts == []


@pytest.mark.asyncio
async def test_crisis_skips_gateway_and_store(handler, gateway, store) -> None:
    result = await handler.handle(_chat("I want to end my life"))

    assert result.is_crisis is True
    assert result.message == CRISIS_MESSAGE
    assert gateway.calls == []
    assert store.inserts == []


@pytest.mark.asyncio
async def test_crisis_only_checks_latest_message(handler, gateway) -> None:
    result = await handler.handle(
        _chat("I thought about suicide last year", "Thank you for sharing.", "Today was better")
    )

    assert result.is_crisis is False
    assert len(gateway.calls) == 1


@pytest.mark.asyncio
async def test_crisis_reply_persisted_when_enabled(gateway, store, persona) -> None:
    settings = Settings(_env_file=None, gateway_api_key="k", persist_crisis_replies=True)
    handler = TherapistChatHandler(settings, gateway, store, persona)

    await handler.handle(_chat("I want to hurt myself", session_id="s-9"))

    assert gateway.calls == []
    assert [(m.session_id, m.role, m.content) for m in store.inserts] == [
        ("s-9", MessageRole.ASSISTANT, CRISIS_MESSAGE)
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [RateLimitedError(), ServiceUnavailableError(), GatewayFailureError(upstream_status=500)],
)
async def test_gateway_errors_propagate_without_writes(handler, gateway, store, error) -> None:
    gateway.error = error

    with pytest.raises(type(error)):
        await handler.handle(_chat("hello"))

    assert store.inserts == []


@pytest.mark.asyncio
async def test_summary_uses_summary_prompt_and_never_writes(handler, gateway, store, persona) -> None:
    gateway.reply = "You talked about stress at work and tried box breathing."
    request = SummaryRequest(
        type="summary",
        messages=[
            {"role": "user", "content": "Work is stressful"},
            {"role": "assistant", "content": "Tell me more"},
        ],
        session_id="s-1",
    )

    result = await handler.handle(request)

    assert result.message == "You talked about stress at work and tried box breathing."
    assert gateway.calls[0][0]["content"] == persona.summary_prompt
    assert len(gateway.calls[0]) == 3
    assert store.inserts == []


@pytest.mark.asyncio
async def test_summary_is_not_crisis_screened(handler, gateway) -> None:
    request = SummaryRequest(
        type="summary",
        messages=[{"role": "user", "content": "I said I want to die earlier"}],
    )

    result = await handler.handle(request)

    assert result.message == gateway.reply
    assert len(gateway.calls) == 1


@pytest.mark.asyncio
async def test_missing_credential_fails_before_any_work(gateway, store, persona) -> None:
    handler = TherapistChatHandler(
        Settings(_env_file=None, gateway_api_key=""), gateway, store, persona
    )

    with pytest.raises(ConfigurationError):
        await handler.handle(_chat("I want to die"))

    assert gateway.calls == []
    assert store.inserts == []
