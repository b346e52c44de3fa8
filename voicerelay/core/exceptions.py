"""
VoiceRelay exception hierarchy.

Relay errors inherit from VoiceRelayError and carry the fields of the JSON
error envelope, so the API middleware can render every failure the same
way. Recorder errors inherit from RecorderError and never cross the HTTP
boundary.
"""


class VoiceRelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(
        self,
        error: str = "Something went wrong",
        details: str = "An unexpected error occurred",
        status_code: int = 500,
    ) -> None:
        self.error = error
        self.details = details
        self.status_code = status_code
        super().__init__(details)


class NoAudioFileError(VoiceRelayError):
    """Raised when a multipart request carries no file part."""

    def __init__(self) -> None:
        super().__init__(
            error="No audio file uploaded",
            details="Please upload an audio file",
            status_code=400,
        )


class InvalidFileTypeError(VoiceRelayError):
    """Raised when the declared MIME type is not in the allow-list."""

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(
            error="Invalid file type",
            details="Please upload a valid audio file (MP3, WebM, WAV, OGG)",
            status_code=400,
        )


class FileTooLargeError(VoiceRelayError):
    """Raised as soon as the audio field exceeds the size limit."""

    def __init__(self, limit_bytes: int) -> None:
        self.limit_bytes = limit_bytes
        super().__init__(
            error="File too large",
            details=f"Maximum file size is {limit_bytes // (1024 * 1024)}MB",
            status_code=413,
        )


class UploadParseError(VoiceRelayError):
    """Raised when the multipart body cannot be parsed."""

    def __init__(self, detail: str = "Malformed multipart body") -> None:
        super().__init__(error="File upload failed", details=detail, status_code=500)


class UpstreamTranscriptionError(VoiceRelayError):
    """Raised when the external transcription service fails.

    ``status_code`` is the upstream HTTP status when one was received,
    otherwise 500.
    """

    def __init__(self, details: str, status_code: int = 500) -> None:
        super().__init__(error="Transcription failed", details=details, status_code=status_code)


# ---------------------------------------------------------------------------
# Recorder (client) errors
# ---------------------------------------------------------------------------


class RecorderError(Exception):
    """Base exception for recorder errors shown to the user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MicrophonePermissionError(RecorderError):
    """Raised when the host refuses access to the microphone."""

    def __init__(self) -> None:
        super().__init__("Microphone access denied. Please grant permission.")


class MicrophoneUnavailableError(RecorderError):
    """Raised when no working input device can be opened."""

    def __init__(self) -> None:
        super().__init__(
            "Error accessing microphone. Please ensure your device has a working microphone."
        )


class RecorderBusyError(RecorderError):
    """Raised when starting a session while another is recording or processing."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"Cannot start recording while {status}")


class SubmissionError(RecorderError):
    """Raised when the assembled recording could not be transcribed."""
