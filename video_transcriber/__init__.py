"""
video_transcriber

Core modules for the video transcription pipeline:
- downloader: video resolution and download using yt-dlp
- extractor: audio extraction to mono 16 kHz PCM using ffmpeg
- transcriber: speech-to-text backends (mock, faster-whisper, mlx-whisper)
- postprocess: mode-dependent transcript transformation
- pipeline: orchestration and temporary file lifecycle
"""

from .config import Settings
from .errors import (
    DownloadError,
    ExtractionError,
    FetchError,
    NoAudioFormatError,
    PipelineError,
    ResolutionError,
    TranscriptionError,
    VideoTranscriberError,
)
from .pipeline import TranscriptionPipeline, create_pipeline
from .postprocess import Mode, process_transcription

__all__ = [
    "DownloadError",
    "ExtractionError",
    "FetchError",
    "Mode",
    "NoAudioFormatError",
    "PipelineError",
    "ResolutionError",
    "Settings",
    "TranscriptionError",
    "TranscriptionPipeline",
    "VideoTranscriberError",
    "create_pipeline",
    "process_transcription",
]
