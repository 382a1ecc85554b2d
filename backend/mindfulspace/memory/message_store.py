"""MongoDB persistence for sessions and messages.

Two collections, one document per record::

    sessions: {_id, user_id, is_anonymous, status, created_at, ended_at, summary}
    messages: {_id, session_id, role, content, created_at}

Messages are append-only and read back ordered by ``created_at``. A session
moves ``active -> completed`` exactly once through a conditional update.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from mindfulspace.config import Settings
from mindfulspace.errors import SessionClosedError, SessionNotFoundError
from mindfulspace.models.messages import Message, MessageRole
from mindfulspace.models.sessions import Session, SessionStatus

logger = logging.getLogger(__name__)

SESSIONS_COLLECTION = "sessions"
MESSAGES_COLLECTION = "messages"


class MessageStore:
    """Async session/message store backed by MongoDB (motor).

    Lifecycle:
        store = MessageStore(settings)
        await store.initialize()   # call once at startup
        ...
        await store.close()        # call once at shutdown
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Connect to MongoDB and ensure indexes."""
        if self._client is not None:
            logger.warning("MessageStore already initialized - skipping")
            return

        logger.info("Connecting to MongoDB at %s", self._settings.mongodb_uri)
        self._client = AsyncIOMotorClient(
            self._settings.mongodb_uri,
            serverSelectionTimeoutMS=5_000,
            tz_aware=True,
        )
        self._db = self._client[self._settings.mongodb_database]
        await self._client.admin.command("ping")

        await self._messages.create_index(
            [("session_id", ASCENDING), ("created_at", ASCENDING)]
        )
        await self._sessions.create_index(
            [("user_id", ASCENDING), ("status", ASCENDING), ("created_at", DESCENDING)]
        )
        logger.info("MongoDB connection established")

    async def close(self) -> None:
        """Release connections."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("MongoDB connection closed")

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError(
                "MessageStore not initialized - call initialize() first"
            )
        return self._db

    @property
    def _sessions(self) -> AsyncIOMotorCollection:
        return self.db[SESSIONS_COLLECTION]

    @property
    def _messages(self) -> AsyncIOMotorCollection:
        return self.db[MESSAGES_COLLECTION]

    async def ping(self) -> None:
        await self.db.command("ping")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self, user_id: Optional[str] = None) -> Session:
        """Create an active session; anonymous when ``user_id`` is None."""
        session = Session(user_id=user_id, is_anonymous=user_id is None)
        await self._sessions.insert_one(session.to_document())
        logger.info(
            "Created session %s (anonymous=%s)", session.id, session.is_anonymous
        )
        return session

    async def get_session(self, session_id: str) -> Session:
        doc = await self._sessions.find_one({"_id": session_id})
        if doc is None:
            raise SessionNotFoundError()
        return Session.from_document(doc)

    async def complete_session(self, session_id: str, summary: str) -> Session:
        """Mark an active session completed with its summary.

        Raises:
            SessionNotFoundError: No such session.
            SessionClosedError: The session was already completed.
        """
        doc = await self._sessions.find_one_and_update(
            {"_id": session_id, "status": SessionStatus.ACTIVE.value},
            {
                "$set": {
                    "status": SessionStatus.COMPLETED.value,
                    "ended_at": datetime.now(timezone.utc),
                    "summary": summary,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            # Distinguish "missing" from "already completed"
            await self.get_session(session_id)
            raise SessionClosedError()
        logger.info("Completed session %s", session_id)
        return Session.from_document(doc)

    async def list_sessions(
        self,
        user_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        limit: int = 50,
    ) -> list[Session]:
        """Return sessions newest first, filtered by owner and status."""
        query: dict[str, object] = {}
        if user_id is not None:
            query["user_id"] = user_id
        if status is not None:
            query["status"] = status.value

        cursor = self._sessions.find(query).sort("created_at", DESCENDING).limit(limit)
        return [Session.from_document(doc) async for doc in cursor]

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def insert_message(
        self, session_id: str, role: MessageRole, content: str
    ) -> Message:
        message = Message(session_id=session_id, role=role, content=content)
        await self._messages.insert_one(message.to_document())
        logger.debug("Inserted %s message into session %s", role.value, session_id)
        return message

    async def list_messages(self, session_id: str) -> list[Message]:
        cursor = self._messages.find({"session_id": session_id}).sort(
            [("created_at", ASCENDING), ("_id", ASCENDING)]
        )
        return [Message.from_document(doc) async for doc in cursor]

    async def watch_messages(self, session_id: str) -> AsyncIterator[Message]:
        """Yield messages inserted into ``session_id`` from now on.

        Uses a MongoDB change stream, so the server must run as a replica set.
        """
        pipeline = [
            {
                "$match": {
                    "operationType": "insert",
                    "fullDocument.session_id": session_id,
                }
            }
        ]
        async with self._messages.watch(pipeline) as stream:
            async for change in stream:
                yield Message.from_document(change["fullDocument"])
