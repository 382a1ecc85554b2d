"""Session management endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from mindfulspace.dependencies import get_message_store, get_session_service
from mindfulspace.memory.message_store import MessageStore
from mindfulspace.models.messages import AppendMessageRequest, Message
from mindfulspace.models.sessions import (
    CreateSessionRequest,
    EndSessionResponse,
    Session,
    SessionSummary,
)
from mindfulspace.services.sessions import SessionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=Session, status_code=201)
async def create_session(
    body: Optional[CreateSessionRequest] = Body(default=None),
    service: SessionService = Depends(get_session_service),
) -> Session:
    """Start a new active session. Without ``user_id`` the session is anonymous."""
    user_id = body.user_id if body else None
    return await service.start_session(user_id)


@router.get("", response_model=list[SessionSummary])
async def list_completed_sessions(
    user_id: str = Query(..., min_length=1),
    service: SessionService = Depends(get_session_service),
) -> list[SessionSummary]:
    """Return the completed sessions of a user, newest first (history view)."""
    return await service.history(user_id)


@router.get("/{session_id}", response_model=Session)
async def get_session(
    session_id: str,
    store: MessageStore = Depends(get_message_store),
) -> Session:
    return await store.get_session(session_id)


@router.get("/{session_id}/messages", response_model=list[Message])
async def list_session_messages(
    session_id: str,
    store: MessageStore = Depends(get_message_store),
) -> list[Message]:
    """Return the messages of a session in creation order."""
    await store.get_session(session_id)
    return await store.list_messages(session_id)


@router.post("/{session_id}/messages", response_model=Message, status_code=201)
async def post_user_message(
    session_id: str,
    body: AppendMessageRequest,
    service: SessionService = Depends(get_session_service),
) -> Message:
    """Append a user message to an active session."""
    return await service.post_user_message(session_id, body.content)


@router.post("/{session_id}/end", response_model=EndSessionResponse)
async def end_session(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> EndSessionResponse:
    """Generate the session summary and mark the session completed."""
    session = await service.end_session(session_id)
    return EndSessionResponse(session=session)
