"""
transcriber.py

Transcriber with pluggable backends (mock, Faster-Whisper and MLX-Whisper).
Inference itself is delegated to the backend libraries.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import Optional

from .errors import TranscriptionError

logger = logging.getLogger(__name__)

MOCK_TRANSCRIPT = (
    "This is a mock transcription. The actual transcription will be implemented "
    "using Whisper API or similar service."
)


def whisper_language(language: Optional[str]) -> Optional[str]:
    """
    Reduce a language hint to the code Whisper expects.

    Args:
        language: Language hint such as "en", "en-US" or "auto"

    Returns:
        Optional[str]: Primary language subtag ("en"), or None to let the model detect it
    """
    if not language:
        return None
    code = language.strip().replace("_", "-").split("-")[0].lower()
    if not code or code == "auto":
        return None
    return code


def _check_audio(audio_path: str) -> None:
    if not os.path.isfile(audio_path):
        raise TranscriptionError(f"audio file not found: {audio_path}")
    if os.path.getsize(audio_path) == 0:
        raise TranscriptionError(f"audio file is empty: {audio_path}")


class BaseTranscriber(ABC):
    """
    Abstract base class for transcription backends.
    All backends must implement the transcribe method with consistent output format.
    """

    @abstractmethod
    def transcribe(self, audio_path: str, language: str) -> str:
        """
        Transcribe an audio file to plain text.

        Args:
            audio_path: Path to a mono 16 kHz PCM audio file
            language: Target language hint (e.g. "en")

        Returns:
            str: The transcript

        Raises:
            TranscriptionError: If the backend is unreachable or rejects the input
        """
        pass


class MockTranscriber(BaseTranscriber):
    """
    Placeholder backend returning a fixed sentence.
    Used until a real speech-recognition backend is configured.
    """

    def __init__(self, text: str = MOCK_TRANSCRIPT):
        self.text = text

    def transcribe(self, audio_path: str, language: str) -> str:
        _check_audio(audio_path)
        logger.info("[Mock Backend] Returning placeholder transcript for %s (language=%s)", audio_path, language)
        return self.text


class FasterWhisperBackend(BaseTranscriber):
    """
    CPU-optimized transcription backend using faster-whisper.
    Works on any platform (macOS, Linux, Windows).
    """

    def __init__(self, model_size: str = "medium", device: str = "cpu", compute_type: str = "int8"):
        """
        Initialize the Faster-Whisper backend.

        Args:
            model_size: Whisper model size (e.g., "medium", "large-v3")
            device: Device to use for inference ("cpu" for cross-platform compatibility)
            compute_type: Quantization type ("int8" for optimized performance)
        """
        from faster_whisper import WhisperModel

        logger.info(
            "[Faster-Whisper Backend] Loading model: %s (device=%s, compute_type=%s)",
            model_size, device, compute_type,
        )
        self.model = WhisperModel(model_size, device=device, compute_type=compute_type)
        logger.info("[Faster-Whisper Backend] Model loaded successfully.")

    def transcribe(self, audio_path: str, language: str) -> str:
        _check_audio(audio_path)
        logger.info("[Faster-Whisper Backend] Starting transcription: %s", audio_path)

        try:
            segments, info = self.model.transcribe(
                audio_path,
                language=whisper_language(language),
                beam_size=5,
                vad_filter=True,
                vad_parameters=dict(min_silence_duration_ms=500),
            )
            # segments is a lazy generator; decoding errors surface while iterating
            texts = [segment.text.strip() for segment in segments]
        except Exception as e:
            raise TranscriptionError(f"faster-whisper failed: {e}") from e

        logger.info(
            "[Faster-Whisper Backend] Transcription completed. Language: %s (probability: %.2f), segments: %d",
            info.language, info.language_probability, len(texts),
        )
        return " ".join(text for text in texts if text)


class MlxWhisperBackend(BaseTranscriber):
    """
    GPU-optimized transcription backend using MLX-Whisper.
    Only works on Apple Silicon (Mac M1/M2/M3/M4).
    """

    def __init__(self, model_size: str = "medium"):
        # Check if running on macOS
        if sys.platform != "darwin":
            raise RuntimeError(
                "MLX backend is only supported on macOS with Apple Silicon. "
                f"Current platform: {sys.platform}. "
                "Please set TRANSCRIPTION_BACKEND=faster_whisper in your .env file."
            )

        # Lazy import to avoid import errors on non-macOS systems
        try:
            import mlx_whisper
            self.mlx_whisper = mlx_whisper
        except ImportError as e:
            raise ImportError(
                "mlx-whisper is not installed. Install it with: pip install mlx-whisper"
            ) from e

        # MLX community model naming: mlx-community/whisper-{size}-mlx
        self.model_path = f"mlx-community/whisper-{model_size}-mlx"
        self.model_size = model_size

        logger.info("[MLX Backend] Initialized with model: %s (GPU Mode)", self.model_path)

    def transcribe(self, audio_path: str, language: str) -> str:
        _check_audio(audio_path)
        logger.info("[MLX Backend] Starting transcription: %s", audio_path)

        try:
            result = self.mlx_whisper.transcribe(
                audio_path,
                path_or_hf_repo=self.model_path,
                language=whisper_language(language),
            )
        except Exception as e:
            raise TranscriptionError(f"mlx-whisper failed: {e}") from e

        # MLX output format: {"segments": [...], "text": "..."}
        segments = result.get("segments") or []
        texts = [segment.get("text", "").strip() for segment in segments]
        text = " ".join(t for t in texts if t) or result.get("text", "").strip()

        logger.info("[MLX Backend] Transcription completed. Total segments: %d", len(segments))
        return text


def get_transcriber(backend_type: str, model_size: str = "medium") -> BaseTranscriber:
    """
    Factory function to create the appropriate transcriber backend.

    Args:
        backend_type: Backend type ("mock", "mlx" or "faster_whisper")
        model_size: Whisper model size (e.g., "medium", "large-v3", "small")

    Returns:
        BaseTranscriber: Configured transcriber instance

    Raises:
        ValueError: If backend_type is not recognized
        RuntimeError: If MLX is selected on non-macOS platform
        ImportError: If required backend library is not installed
    """
    backend_type = backend_type.lower().strip()

    if backend_type == "mock":
        return MockTranscriber()

    elif backend_type == "faster_whisper":
        logger.info("Initializing Faster-Whisper Backend (CPU Mode)")
        return FasterWhisperBackend(model_size=model_size, device="cpu", compute_type="int8")

    elif backend_type == "mlx":
        logger.info("Initializing MLX Backend (GPU Mode)")
        return MlxWhisperBackend(model_size=model_size)

    else:
        raise ValueError(
            f"Unknown transcription backend: '{backend_type}'. "
            f"Supported backends: 'mock', 'mlx' (Apple Silicon GPU) or 'faster_whisper' (CPU, any OS)"
        )
