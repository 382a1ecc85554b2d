"""Request and response schema of the therapist chat endpoint.

There is exactly one accepted request shape, tagged by ``type``::

    {"type": "chat",    "messages": [{role, content}, ...], "sessionId": "..."}
    {"type": "summary", "messages": [{role, content}, ...], "sessionId": "..."}

Unknown fields (for example a bare ``message`` or ``requestType``) are
rejected rather than silently ignored.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mindfulspace.models.messages import ChatTurn, MessageRole


class _TherapistRequestBase(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    messages: list[ChatTurn] = Field(min_length=1)
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ChatRequest(_TherapistRequestBase):
    """One chat turn; the last entry of ``messages`` is the new user message."""

    type: Literal["chat"]

    @model_validator(mode="after")
    def _last_turn_is_user(self) -> "ChatRequest":
        if self.messages[-1].role != MessageRole.USER:
            raise ValueError("the last message of a chat request must have role 'user'")
        return self

    @property
    def latest_user_content(self) -> str:
        return self.messages[-1].content


class SummaryRequest(_TherapistRequestBase):
    """End-of-session request carrying the full ordered history."""

    type: Literal["summary"]


TherapistRequest = Annotated[
    Union[ChatRequest, SummaryRequest], Field(discriminator="type")
]


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    is_crisis: bool = Field(alias="isCrisis")


class SummaryResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
