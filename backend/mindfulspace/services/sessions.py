"""Session lifecycle: start, post user messages, end with summary, history."""

from __future__ import annotations

import logging
from typing import Optional

from mindfulspace.errors import InvalidRequestError, SessionClosedError
from mindfulspace.memory.message_store import MessageStore
from mindfulspace.models.messages import Message, MessageRole
from mindfulspace.models.sessions import Session, SessionStatus, SessionSummary
from mindfulspace.models.therapist import SummaryRequest
from mindfulspace.services.therapist import TherapistChatHandler

logger = logging.getLogger(__name__)


class SessionService:
    """Drives a session through ``active -> completed``."""

    def __init__(self, store: MessageStore, handler: TherapistChatHandler) -> None:
        self._store = store
        self._handler = handler

    async def start_session(self, user_id: Optional[str] = None) -> Session:
        return await self._store.create_session(user_id)

    async def post_user_message(self, session_id: str, content: str) -> Message:
        session = await self._store.get_session(session_id)
        if not session.is_active:
            raise SessionClosedError()
        return await self._store.insert_message(session_id, MessageRole.USER, content)

    async def end_session(self, session_id: str) -> Session:
        """Summarize the conversation and close the session.

        The summary is generated before the status changes, so a gateway
        failure leaves the session active and the caller can retry.
        """
        session = await self._store.get_session(session_id)
        if not session.is_active:
            raise SessionClosedError()

        history = await self._store.list_messages(session_id)
        if not history:
            raise InvalidRequestError("Cannot end a session without messages")

        result = await self._handler.handle(
            SummaryRequest(
                type="summary",
                messages=[message.to_turn() for message in history],
                session_id=session_id,
            )
        )
        completed = await self._store.complete_session(session_id, result.message)
        logger.info("Session %s ended after %d messages", session_id, len(history))
        return completed

    async def history(self, user_id: str) -> list[SessionSummary]:
        """Completed sessions of ``user_id``, newest first."""
        sessions = await self._store.list_sessions(
            user_id=user_id, status=SessionStatus.COMPLETED
        )
        return [SessionSummary.from_session(session) for session in sessions]
