"""WebSocket endpoint for live recording.

The client streams raw PCM audio bytes (16-bit, mono, at the configured
sample rate) over the connection. The server starts a recording session on
connect and forwards every controller ``SessionEvent`` as JSON: live
transcript lines while recording, then the classification and the saved
entry after stop.

Protocol:
    - Client sends: PCM bytes, then the text message ``"stop"``.
    - Server sends: ``SessionEvent`` objects; the socket is closed once the
      classification and upload of the stopped session have completed.
    - Disconnecting without ``"stop"`` stops the session; its upload still
      completes in the background.
"""

import asyncio
import logging

from fastapi import APIRouter, WebSocket

from talkitout.core.exceptions import TalkItOutError
from talkitout.core.models import SessionEvent, SessionEventType
from talkitout.services.audio.recorder import WavRecorder

logger = logging.getLogger(__name__)

router = APIRouter()

STOP_MESSAGE = "stop"


async def _forward_events(websocket: WebSocket, events: asyncio.Queue) -> None:
    """Send queued session events until the ``None`` sentinel arrives."""
    while True:
        event = await events.get()
        if event is None:
            return
        try:
            await websocket.send_json(event.model_dump(mode="json"))
        except Exception:
            logger.debug("Dropping %s event; client is gone", event.type)


async def _receive_frames(websocket: WebSocket, recorder: WavRecorder) -> bool:
    """Feed PCM frames to the recorder.

    Returns:
        True if the client asked to stop, False if it disconnected.
    """
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return False
        data = message.get("bytes")
        if data:
            recorder.feed(data)
        elif (message.get("text") or "").strip().lower() == STOP_MESSAGE:
            return True


@router.websocket("/ws/record")
async def record_ws(websocket: WebSocket) -> None:
    """Record one journal entry over a WebSocket connection."""
    await websocket.accept()
    services = websocket.app.state.services
    controller = services.controller

    events: asyncio.Queue[SessionEvent | None] = asyncio.Queue()
    unsubscribe = controller.subscribe(events.put_nowait)
    sender = asyncio.create_task(_forward_events(websocket, events))

    session_id: int | None = None
    connected = True
    try:
        session_id = await controller.start()
        logger.info("Record WebSocket connected for session %s", session_id)
        connected = await _receive_frames(websocket, services.recorder)
        if not connected:
            logger.info("Record WebSocket disconnected during session %s", session_id)
    except TalkItOutError as exc:
        logger.info("Record WebSocket refused: %s", exc.detail)
        events.put_nowait(
            SessionEvent(
                type=SessionEventType.error,
                session_id=controller.session_id,
                data={"detail": exc.detail, "code": exc.code},
            )
        )
    except Exception:
        logger.exception("Error during recording session %s", session_id)
        connected = False
    finally:
        try:
            owns_session = session_id is not None and controller.session_id == session_id
            if owns_session and controller.is_recording:
                await controller.stop()
            if owns_session and connected:
                await controller.drain()
        finally:
            unsubscribe()
            events.put_nowait(None)

    await sender
    if connected:
        await websocket.close()
