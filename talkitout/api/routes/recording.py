"""
Recording REST endpoints.

Start and stop the recording session and read its display state. Audio
frames themselves arrive over the ``/ws/record`` WebSocket; these endpoints
drive the same controller for clients that only need the state machine.
"""

from fastapi import APIRouter, Depends

from talkitout.api.dependencies import AppServices, get_services
from talkitout.core.models import PendingRetryResponse, RecordingStateResponse

router = APIRouter(prefix="/recording", tags=["recording"])


@router.get("", response_model=RecordingStateResponse)
async def get_recording_state(services: AppServices = Depends(get_services)):
    """Current transcript lines, topic, prompt and streak."""
    return services.controller.state()


@router.post("/start", response_model=RecordingStateResponse)
async def start_recording(services: AppServices = Depends(get_services)):
    """Idle -> Recording. 403 if microphone permission is denied, 409 if already recording."""
    await services.controller.start()
    return services.controller.state()


@router.post("/stop", response_model=RecordingStateResponse)
async def stop_recording(services: AppServices = Depends(get_services)):
    """Recording -> Idle. Classification and upload continue in the background."""
    await services.controller.stop()
    return services.controller.state()


@router.post("/pending/retry", response_model=PendingRetryResponse)
async def retry_pending_uploads(services: AppServices = Depends(get_services)):
    """Re-attempt every upload that failed earlier."""
    return await services.controller.retry_pending_uploads()
