"""Message models for the chat handler and the message store."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Message sender role."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatTurn(BaseModel):
    """One role-tagged turn as sent by the client."""

    model_config = ConfigDict(extra="forbid")

    role: MessageRole
    content: str

    @field_validator("role")
    @classmethod
    def _no_client_system_turns(cls, value: MessageRole) -> MessageRole:
        # System instructions are chosen by the server only
        if value == MessageRole.SYSTEM:
            raise ValueError("role must be 'user' or 'assistant'")
        return value

    def as_gateway_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Message(BaseModel):
    """Persisted chat message. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    session_id: str
    role: MessageRole
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(mode="python")
        doc["_id"] = doc.pop("id")
        doc["role"] = self.role.value
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Message":
        return cls(
            id=str(doc["_id"]),
            session_id=doc["session_id"],
            role=doc["role"],
            content=doc["content"],
            created_at=doc["created_at"],
        )

    def to_turn(self) -> ChatTurn:
        return ChatTurn(role=self.role, content=self.content)


class AppendMessageRequest(BaseModel):
    """User message posted into an active session."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be blank")
        return value


class MessageEvent(BaseModel):
    """Payload pushed to live subscribers when a message is inserted."""

    type: str = "message"
    message: Message
