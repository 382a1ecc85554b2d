"""Therapist chat endpoint: one call per chat turn or session summary."""

from __future__ import annotations

import logging
from typing import Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from mindfulspace.config import CORS_ALLOW_HEADERS
from mindfulspace.dependencies import get_therapist_handler
from mindfulspace.errors import (
    InternalError,
    InvalidRequestError,
    MindfulSpaceError,
    describe_validation_errors,
)
from mindfulspace.models.therapist import (
    ChatResponse,
    ErrorResponse,
    SummaryResponse,
    TherapistRequest,
)
from mindfulspace.services.therapist import TherapistChatHandler

logger = logging.getLogger(__name__)
router = APIRouter()

_request_adapter: TypeAdapter[TherapistRequest] = TypeAdapter(TherapistRequest)


def preflight_headers(origin: str | None, allowed_origins: list[str]) -> dict[str, str]:
    """CORS headers for an OPTIONS request to this endpoint.

    The request headers a browser asks for are not checked; the answer
    always lists the headers the endpoint accepts.
    """
    headers = {"Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS)}
    if "*" in allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


@router.post(
    "",
    response_model=None,
    responses={
        200: {"model": Union[ChatResponse, SummaryResponse]},
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def therapist_chat(
    request: Request,
    handler: TherapistChatHandler = Depends(get_therapist_handler),
) -> JSONResponse:
    """Reply to a chat turn or summarize a finished session.

    Body::

        {"type": "chat" | "summary", "messages": [{role, content}], "sessionId"?: str}

    Chat replies are ``{"message", "isCrisis"}``; summaries are ``{"message"}``.
    Errors are ``{"error"}`` with status 400, 402, 429 or 500.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidRequestError("Request body must be valid JSON") from exc

    try:
        parsed = _request_adapter.validate_python(payload)
    except ValidationError as exc:
        raise InvalidRequestError(describe_validation_errors(exc.errors())) from exc

    try:
        result = await handler.handle(parsed)
    except MindfulSpaceError:
        raise
    except Exception as exc:
        logger.exception("Error in therapist chat (session=%s)", parsed.session_id)
        raise InternalError(str(exc) or None) from exc

    return JSONResponse(content=result.model_dump(by_alias=True))
