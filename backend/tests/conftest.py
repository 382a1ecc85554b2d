"""Shared test fixtures for the MindfulSpace backend."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mindfulspace.agent.prompts import Persona, load_persona
from mindfulspace.config import Settings, get_settings
from mindfulspace.dependencies import (
    get_gateway_client,
    get_message_store,
    get_persona,
)
from mindfulspace.errors import SessionClosedError, SessionNotFoundError
from mindfulspace.main import app
from mindfulspace.models.messages import Message, MessageRole
from mindfulspace.models.sessions import Session, SessionStatus


class FakeGateway:
    """Records every completion request; replies or raises as configured."""

    def __init__(self, reply: str = "That sounds really hard. What's been weighing on you most?") -> None:
        self.reply = reply
        self.error: Optional[Exception] = None
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeMessageStore:
    """In-memory stand-in for the MongoDB message store."""

    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}
        self.messages: list[Message] = []
        self.inserts: list[Message] = []
        self.ping_error: Optional[Exception] = None
        self.watch_error: Optional[Exception] = None
        self.block_watch = False
        self.open_watchers = 0
        self._clock = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=30)
        return self._clock

    async def ping(self) -> None:
        if self.ping_error is not None:
            raise self.ping_error

    async def create_session(self, user_id: Optional[str] = None) -> Session:
        session = Session(
            user_id=user_id, is_anonymous=user_id is None, created_at=self._tick()
        )
        self.sessions[session.id] = session
        return session

    async def get_session(self, session_id: str) -> Session:
        if session_id not in self.sessions:
            raise SessionNotFoundError()
        return self.sessions[session_id]

    async def complete_session(self, session_id: str, summary: str) -> Session:
        session = await self.get_session(session_id)
        if not session.is_active:
            raise SessionClosedError()
        completed = session.model_copy(
            update={
                "status": SessionStatus.COMPLETED,
                "ended_at": self._tick() + timedelta(minutes=20),
                "summary": summary,
            }
        )
        self.sessions[session_id] = completed
        return completed

    async def list_sessions(
        self,
        user_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        limit: int = 50,
    ) -> list[Session]:
        found = [
            s
            for s in self.sessions.values()
            if (user_id is None or s.user_id == user_id)
            and (status is None or s.status == status)
        ]
        found.sort(key=lambda s: s.created_at, reverse=True)
        return found[:limit]

    async def insert_message(
        self, session_id: str, role: MessageRole, content: str
    ) -> Message:
        message = Message(
            session_id=session_id, role=role, content=content, created_at=self._tick()
        )
        self.messages.append(message)
        self.inserts.append(message)
        return message

    async def list_messages(self, session_id: str) -> list[Message]:
        return [m for m in self.messages if m.session_id == session_id]

    async def watch_messages(self, session_id: str) -> AsyncIterator[Message]:
        self.open_watchers += 1
        try:
            for message in list(self.messages):
                if message.session_id == session_id:
                    yield message
            if self.watch_error is not None:
                raise self.watch_error
            if self.block_watch:
                # like a change stream on an idle session
                await asyncio.Event().wait()
        finally:
            self.open_watchers -= 1


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, gateway_api_key="test-key")


@pytest.fixture
def persona() -> Persona:
    return load_persona()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def store() -> FakeMessageStore:
    return FakeMessageStore()


@pytest_asyncio.fixture
async def client(
    settings: Settings,
    gateway: FakeGateway,
    store: FakeMessageStore,
    persona: Persona,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with external services faked out."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_gateway_client] = lambda: gateway
    app.dependency_overrides[get_message_store] = lambda: store
    app.dependency_overrides[get_persona] = lambda: persona

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
