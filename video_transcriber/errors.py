"""
errors.py

Exception hierarchy for the transcription pipeline.
Each stage raises its own error type; the orchestrator wraps them in PipelineError.
"""

from typing import Optional


class VideoTranscriberError(Exception):
    """Base class for all errors raised by this package."""


class FetchError(VideoTranscriberError):
    """Raised by the media fetcher."""


class ResolutionError(FetchError):
    """The URL is invalid or the remote resource could not be located."""


class NoAudioFormatError(FetchError):
    """The resolved media has no stream variant carrying audio."""

    def __init__(self, message: str = "no formats with audio found"):
        super().__init__(message)


class DownloadError(FetchError):
    """The transfer of the selected stream was interrupted or produced no data."""


class ExtractionError(VideoTranscriberError):
    """
    Raised when the external transcoder fails.

    Args:
        message: Human-readable description
        returncode: Exit status of the transcoder, None if it never completed
        stderr: Tail of the transcoder's error output
    """

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class TranscriptionError(VideoTranscriberError):
    """The speech-recognition backend rejected the input or was unreachable."""


class PipelineError(VideoTranscriberError):
    """A stage failure, prefixed with the name of the failing stage."""

    def __init__(self, stage: str, prefix: str, cause: BaseException):
        super().__init__(f"{prefix}: {cause}")
        self.stage = stage
        self.cause = cause
