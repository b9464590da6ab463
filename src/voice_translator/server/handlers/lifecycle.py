"""Connection lifecycle handlers for the Voice Translator gateway.

Handles connect and disconnect events.
"""

import logging
from typing import Any

from voice_translator.observability.metrics import (
    decrement_active_connections,
    increment_active_connections,
)
from voice_translator.server.models import ConnectedPayload
from voice_translator.server.session import SessionStore

logger = logging.getLogger(__name__)


async def handle_connect(
    sio: Any,
    sid: str,
    environ: dict[str, Any],
    session_store: SessionStore,
) -> None:
    """Handle connect event.

    Creates the connection session and acknowledges the connection.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        environ: ASGI environ dict containing headers.
        session_store: Session store instance.
    """
    await session_store.create(sid=sid)
    increment_active_connections()

    remote = environ.get("REMOTE_ADDR", "unknown")
    logger.info(f"Client connected: sid={sid}, remote={remote}")

    await sio.emit("connected", ConnectedPayload(socket_id=sid).to_wire(), to=sid)


async def handle_disconnect(
    sio: Any,
    sid: str,
    session_store: SessionStore,
) -> None:
    """Handle disconnect event.

    Cancels the running job, if any, and removes the session.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        session_store: Session store instance.
    """
    session = await session_store.delete(sid)

    if session is None:
        logger.debug(f"Disconnect from unknown session: sid={sid}")
        return

    decrement_active_connections()

    if session.cancel_job():
        logger.info(f"Cancelled running job on disconnect: job_id={session.current_job_id}, sid={sid}")

    logger.info(
        f"Client disconnected: sid={sid}, jobs_started={session.jobs_started}, "
        f"completed={session.jobs_completed}, failed={session.jobs_failed}, "
        f"duration_ms={session.duration_ms()}"
    )


def register_lifecycle_handlers(
    sio: Any,
    session_store: SessionStore,
) -> None:
    """Register connection lifecycle event handlers.

    Args:
        sio: Socket.IO server instance.
        session_store: Session store instance.
    """

    @sio.on("connect")
    async def on_connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
        await handle_connect(sio, sid, environ, session_store)

    @sio.on("disconnect")
    async def on_disconnect(sid: str, reason: Any = None) -> None:
        await handle_disconnect(sio, sid, session_store)
