"""Error taxonomy shared by the handler, the gateway client and the API layer.

Every error carries the HTTP status it is surfaced with and a user-facing
message. The API layer turns them into ``{"error": message}`` bodies.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence


class MindfulSpaceError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(MindfulSpaceError):
    status_code = 400
    default_message = "Invalid request"


class ConfigurationError(MindfulSpaceError):
    """A credential or setting required to serve the request is missing."""

    status_code = 500
    default_message = "GATEWAY_API_KEY is not configured"


class RateLimitedError(MindfulSpaceError):
    """The gateway answered 429; the caller may retry later."""

    status_code = 429
    default_message = "Rate limit exceeded. Please try again in a moment."


class ServiceUnavailableError(MindfulSpaceError):
    """The gateway answered 402 (credits exhausted / payment required)."""

    status_code = 402
    default_message = "Service temporarily unavailable. Please try again later."


class GatewayFailureError(MindfulSpaceError):
    status_code = 500
    default_message = "AI Gateway error"

    def __init__(self, message: str | None = None, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        if message is None and upstream_status is not None:
            message = f"AI Gateway error: {upstream_status}"
        super().__init__(message)


class SessionNotFoundError(MindfulSpaceError):
    status_code = 404
    default_message = "Session not found"


class SessionClosedError(MindfulSpaceError):
    """The session is already completed and accepts no further changes."""

    status_code = 409
    default_message = "Session is already completed"


class InternalError(MindfulSpaceError):
    status_code = 500


def error_body(exc: MindfulSpaceError) -> dict[str, str]:
    return {"error": exc.message}


def describe_validation_errors(errors: Sequence[Mapping[str, Any]]) -> str:
    """Flatten pydantic error dicts into one readable line."""
    parts = []
    for err in errors:
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)
