"""WebSocket feed pushing newly inserted messages of a session."""

import asyncio
import logging
from contextlib import aclosing

from fastapi import Depends, WebSocket, WebSocketDisconnect

from mindfulspace.dependencies import get_message_store
from mindfulspace.memory.message_store import MessageStore
from mindfulspace.models.messages import MessageEvent

logger = logging.getLogger(__name__)


async def websocket_session_messages(
    websocket: WebSocket,
    session_id: str,
    store: MessageStore = Depends(get_message_store),
) -> None:
    """Stream message inserts for one session.

    Protocol:
        Server sends JSON: {"type": "message", "message": {id, session_id, role,
                            content, created_at}} per inserted message
        Server sends JSON: {"type": "error", "error": "..."} before closing on failure
        Client frames are ignored; a client disconnect stops the change stream.
    """
    await websocket.accept()
    logger.info("Live feed connected: session_id=%s", session_id)

    forward = asyncio.create_task(_forward_messages(websocket, store, session_id))
    listen = asyncio.create_task(_wait_for_disconnect(websocket))

    done, pending = await asyncio.wait(
        {forward, listen}, return_when=asyncio.FIRST_COMPLETED
    )
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)

    if listen in done:
        logger.info("Live feed disconnected: session_id=%s", session_id)
        return

    exc = forward.exception()
    if exc is None:
        await websocket.close()
        return
    if isinstance(exc, WebSocketDisconnect):
        logger.info("Live feed disconnected: session_id=%s", session_id)
        return

    logger.error("Live feed error for session %s", session_id, exc_info=exc)
    try:
        await websocket.send_json({"type": "error", "error": str(exc)})
        await websocket.close(code=1011)
    except (WebSocketDisconnect, RuntimeError) as send_exc:
        # Socket already gone
        logger.debug("Could not report live feed error for %s: %s", session_id, send_exc)


async def _forward_messages(
    websocket: WebSocket, store: MessageStore, session_id: str
) -> None:
    async with aclosing(store.watch_messages(session_id)) as stream:
        async for message in stream:
            event = MessageEvent(message=message)
            await websocket.send_json(event.model_dump(mode="json"))


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        frame = await websocket.receive()
        if frame.get("type") == "websocket.disconnect":
            return
