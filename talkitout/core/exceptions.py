"""
TalkItOut exception hierarchy.

All application-specific exceptions inherit from TalkItOutError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class TalkItOutError(Exception):
    """Base exception for all TalkItOut errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "TALKITOUT_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class PermissionDeniedError(TalkItOutError):
    """Raised when microphone access is denied."""

    def __init__(
        self,
        detail: str = "Please allow microphone access in Settings to use the recording feature.",
    ) -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED", status_code=403)


class CaptureConfigurationError(TalkItOutError):
    """Raised when the audio session or recorder cannot be set up."""

    def __init__(self, detail: str = "Failed to configure audio capture") -> None:
        super().__init__(detail=detail, code="CAPTURE_CONFIGURATION_ERROR", status_code=500)


class TranscriptionStartError(TalkItOutError):
    """Raised when the live transcription engine fails to start."""

    def __init__(self, detail: str = "Failed to start live transcription") -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_START_ERROR", status_code=500)


class ClassificationError(TalkItOutError):
    """Raised when topic classification fails (absorbed by the classifier)."""

    def __init__(self, detail: str = "Classification failed") -> None:
        super().__init__(detail=detail, code="CLASSIFICATION_ERROR", status_code=500)


class UploadError(TalkItOutError):
    """Raised when a blob cannot be written to the object store.

    ``cause`` holds the underlying exception, if any. No partial write may be
    assumed after this error.
    """

    def __init__(self, detail: str = "Upload failed", cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(detail=detail, code="UPLOAD_ERROR", status_code=502)


class EntryNotFoundError(TalkItOutError):
    """Raised when a journal entry ID does not exist."""

    def __init__(self, entry_id) -> None:
        super().__init__(
            detail=f"Journal entry not found: {entry_id}",
            code="ENTRY_NOT_FOUND",
            status_code=404,
        )


class InvalidEntryError(TalkItOutError):
    """Raised when entry content fails validation."""

    def __init__(self, detail: str = "Invalid journal entry") -> None:
        super().__init__(detail=detail, code="INVALID_ENTRY", status_code=422)


class RecordingAlreadyActiveError(TalkItOutError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class NoActiveRecordingError(TalkItOutError):
    """Raised when stop is requested while no recording is active."""

    def __init__(self) -> None:
        super().__init__(
            detail="No recording is active",
            code="NO_ACTIVE_RECORDING",
            status_code=409,
        )
