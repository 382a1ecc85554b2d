"""Therapist chat handler: crisis screening, prompt selection, generation.

One call per chat turn or per session end. The handler holds no state
between calls; its collaborators are injected at construction.
"""

from __future__ import annotations

import logging
from typing import Protocol, Union

from mindfulspace.agent.prompts import Persona, build_gateway_messages
from mindfulspace.config import Settings
from mindfulspace.errors import ConfigurationError
from mindfulspace.models.messages import Message, MessageRole
from mindfulspace.models.therapist import (
    ChatRequest,
    ChatResponse,
    SummaryRequest,
    SummaryResponse,
)
from mindfulspace.safety import (
    CRISIS_MESSAGE,
    contains_crisis_language,
    latest_user_content,
)

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    async def complete(self, messages: list[dict[str, str]]) -> str: ...


class AssistantMessageWriter(Protocol):
    async def insert_message(
        self, session_id: str, role: MessageRole, content: str
    ) -> Message: ...


class TherapistChatHandler:
    """Handles ``chat`` and ``summary`` requests.

    Side effects: at most one assistant-message write per successful chat
    turn. Summary requests never write; storing the summary on the session
    is the caller's job.
    """

    def __init__(
        self,
        settings: Settings,
        gateway: CompletionClient,
        store: AssistantMessageWriter,
        persona: Persona,
    ) -> None:
        self._settings = settings
        self._gateway = gateway
        self._store = store
        self._persona = persona

    async def handle(
        self, request: Union[ChatRequest, SummaryRequest]
    ) -> Union[ChatResponse, SummaryResponse]:
        logger.info(
            "Therapist request: type=%s session=%s turns=%d",
            request.type,
            request.session_id,
            len(request.messages),
        )
        if not self._settings.gateway_configured:
            raise ConfigurationError()

        if isinstance(request, SummaryRequest):
            return await self._summarize(request)
        return await self._chat(request)

    async def _chat(self, request: ChatRequest) -> ChatResponse:
        if contains_crisis_language(latest_user_content(request.messages)):
            logger.warning("Crisis language detected in session %s", request.session_id)
            if self._settings.persist_crisis_replies and request.session_id:
                await self._store.insert_message(
                    request.session_id, MessageRole.ASSISTANT, CRISIS_MESSAGE
                )
            return ChatResponse(message=CRISIS_MESSAGE, is_crisis=True)

        reply = await self._gateway.complete(
            build_gateway_messages("chat", request.messages, self._persona)
        )

        if request.session_id:
            await self._store.insert_message(
                request.session_id, MessageRole.ASSISTANT, reply
            )
        return ChatResponse(message=reply, is_crisis=False)

    async def _summarize(self, request: SummaryRequest) -> SummaryResponse:
        summary = await self._gateway.complete(
            build_gateway_messages("summary", request.messages, self._persona)
        )
        return SummaryResponse(message=summary)
