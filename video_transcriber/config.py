"""
config.py

Runtime settings read from environment variables (and an optional .env file).
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field

from dotenv import load_dotenv

DOWNLOAD_SUBDIR = "transcriber-downloads"


def default_download_dir() -> str:
    """Shared temporary directory for per-job artifacts: <os temp>/transcriber-downloads."""
    return os.path.join(tempfile.gettempdir(), DOWNLOAD_SUBDIR)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got '{raw}'") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got '{raw}'")
    return value


def _get_log_level(name: str, default: str) -> str:
    level = os.getenv(name, default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got '{level}'")
    return level


@dataclass(frozen=True)
class Settings:
    """
    Configuration for the transcription service.

    Attributes:
        download_dir: Directory holding temporary video/audio artifacts
        transcription_backend: "mock", "faster_whisper" or "mlx"
        whisper_model_size: Whisper model size for the real backends
        ffmpeg_binary: Name or path of the ffmpeg executable
        ffmpeg_timeout: Upper bound for one ffmpeg invocation, in seconds
        socket_timeout: Network socket timeout for yt-dlp, in seconds
        log_level: Logging level name used by the CLI
    """

    download_dir: str = field(default_factory=default_download_dir)
    transcription_backend: str = "mock"
    whisper_model_size: str = "medium"
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_timeout: float = 600.0
    socket_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment, loading .env first.

        Raises:
            ValueError: If a numeric variable or the log level cannot be parsed
        """
        load_dotenv()

        return cls(
            download_dir=os.getenv("TRANSCRIBER_DOWNLOAD_DIR") or default_download_dir(),
            transcription_backend=os.getenv("TRANSCRIPTION_BACKEND", "mock"),
            whisper_model_size=os.getenv("WHISPER_MODEL_SIZE", "medium"),
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", "ffmpeg"),
            ffmpeg_timeout=_get_float("FFMPEG_TIMEOUT", 600.0),
            socket_timeout=_get_float("DOWNLOAD_SOCKET_TIMEOUT", 30.0),
            log_level=_get_log_level("LOG_LEVEL", "INFO"),
        )
