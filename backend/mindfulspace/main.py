"""FastAPI application entry point with lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from mindfulspace.api.live import websocket_session_messages
from mindfulspace.api.router import api_router
from mindfulspace.api.therapist import preflight_headers
from mindfulspace.config import CORS_ALLOW_HEADERS, settings
from mindfulspace.dependencies import get_gateway_client, get_message_store
from mindfulspace.errors import (
    InternalError,
    MindfulSpaceError,
    describe_validation_errors,
    error_body,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    logger.info("Starting MindfulSpace backend...")

    store = get_message_store()
    await store.initialize()
    logger.info("Message store initialized successfully")

    gateway = get_gateway_client()
    await gateway.initialize()
    if not settings.gateway_configured:
        logger.warning("GATEWAY_API_KEY is not set; chat requests will fail with 500")

    yield

    # Cleanup
    await gateway.close()
    await store.close()
    logger.info("MindfulSpace backend shut down cleanly")


app = FastAPI(
    title="MindfulSpace API",
    description="Supportive AI counselor chat with crisis screening and session summaries",
    version="0.1.0",
    lifespan=lifespan,
)

THERAPIST_CHAT_PATH = "/api/ai-therapist-chat"


async def catch_unhandled_errors(request: Request, call_next) -> Response:
    """Turn unexpected exceptions into the JSON error shape.

    Registered inside CORSMiddleware so these responses still carry CORS headers.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("%s %s failed", request.method, request.url.path)
        error = InternalError(str(exc) or None)
        return JSONResponse(status_code=error.status_code, content=error_body(error))


async def answer_therapist_chat_preflight(request: Request, call_next) -> Response:
    """Answer every OPTIONS on the chat endpoint with an empty 200."""
    if request.method == "OPTIONS" and request.url.path.rstrip("/") == THERAPIST_CHAT_PATH:
        return Response(
            status_code=200,
            headers=preflight_headers(
                request.headers.get("origin"), settings.cors_allow_origins
            ),
        )
    return await call_next(request)


# Middleware order: the last one added runs first.
app.add_middleware(BaseHTTPMiddleware, dispatch=catch_unhandled_errors)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=CORS_ALLOW_HEADERS,
)
app.add_middleware(BaseHTTPMiddleware, dispatch=answer_therapist_chat_preflight)


@app.exception_handler(MindfulSpaceError)
async def mindfulspace_error_handler(
    request: Request, exc: MindfulSpaceError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": describe_validation_errors(exc.errors())},
    )


# Mount API routes
app.include_router(api_router, prefix="/api")

# Mount WebSocket endpoint
app.websocket("/ws/sessions/{session_id}/messages")(websocket_session_messages)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
