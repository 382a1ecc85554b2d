"""Session models for conversation lifecycle and the history view."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Session(BaseModel):
    """One bounded conversation between a participant and the counselor persona."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: Optional[str] = None
    is_anonymous: bool = True
    status: SessionStatus = SessionStatus.ACTIVE
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: Optional[datetime] = None
    summary: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(mode="python")
        doc["_id"] = doc.pop("id")
        doc["status"] = self.status.value
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Session":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class SessionSummary(BaseModel):
    """Completed session as shown in the history list."""

    id: str
    created_at: datetime
    ended_at: Optional[datetime] = None
    summary: Optional[str] = None
    duration_minutes: Optional[int] = None

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummary":
        duration = None
        if session.ended_at is not None:
            duration = round(
                (session.ended_at - session.created_at).total_seconds() / 60
            )
        return cls(
            id=session.id,
            created_at=session.created_at,
            ended_at=session.ended_at,
            summary=session.summary,
            duration_minutes=duration,
        )


class CreateSessionRequest(BaseModel):
    """Start a conversation; omit ``user_id`` for an anonymous session."""

    model_config = ConfigDict(extra="forbid")

    user_id: Optional[str] = None


class EndSessionResponse(BaseModel):
    session: Session
