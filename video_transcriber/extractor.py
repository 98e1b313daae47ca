"""
extractor.py

Audio extraction: converts a downloaded video into mono 16 kHz 16-bit PCM audio.
The concrete transcoder sits behind the AudioEncoder interface.
"""

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from .errors import ExtractionError

logger = logging.getLogger(__name__)

AUDIO_SUFFIX = ".wav"
SAMPLE_RATE = 16000
CHANNELS = 1


def audio_path_for(video_path: str) -> str:
    """Deterministic output path: the input path with a fixed suffix appended."""
    return video_path + AUDIO_SUFFIX


class AudioEncoder(ABC):
    """
    Abstract base class for audio extraction backends.
    """

    @abstractmethod
    def encode_to_mono_pcm16k(self, input_path: str) -> str:
        """
        Extract the audio track of a media file as mono 16 kHz 16-bit PCM.

        Args:
            input_path: Path to the source media file (left untouched)

        Returns:
            str: Path to the written audio file

        Raises:
            ExtractionError: If the conversion fails
        """
        pass


class FFmpegEncoder(AudioEncoder):
    """
    Runs the ffmpeg executable as an external process.
    """

    def __init__(self, ffmpeg_binary: str = "ffmpeg", timeout: Optional[float] = 600.0):
        """
        Args:
            ffmpeg_binary: Name (looked up on PATH) or path of the ffmpeg executable
            timeout: Upper bound for one conversion in seconds, None for no bound
        """
        self.ffmpeg_binary = ffmpeg_binary
        self.timeout = timeout

    def build_command(self, input_path: str, output_path: str) -> List[str]:
        # -vn: disable video
        # -acodec pcm_s16le: 16-bit little-endian PCM
        # -ar / -ac: resample and downmix
        return [
            shutil.which(self.ffmpeg_binary) or self.ffmpeg_binary,
            "-hide_banner",
            "-nostdin",
            "-y",
            "-i", input_path,
            "-vn",
            "-acodec", "pcm_s16le",
            "-ar", str(SAMPLE_RATE),
            "-ac", str(CHANNELS),
            output_path,
        ]

    def encode_to_mono_pcm16k(self, input_path: str) -> str:
        if not os.path.isfile(input_path):
            raise ExtractionError(f"input file not found: {input_path}")

        output_path = audio_path_for(input_path)
        command = self.build_command(input_path, output_path)
        logger.info("Extracting audio: %s -> %s", input_path, output_path)

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExtractionError(f"{self.ffmpeg_binary} not found on PATH") from e
        except OSError as e:
            _remove_output(output_path)
            raise ExtractionError(f"could not run {self.ffmpeg_binary}: {e}") from e
        except subprocess.TimeoutExpired as e:
            _remove_output(output_path)
            raise ExtractionError(f"{self.ffmpeg_binary} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            _remove_output(output_path)
            stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            tail = stderr.splitlines()[-1] if stderr else ""
            message = f"{self.ffmpeg_binary} exited with status {result.returncode}"
            if tail:
                message = f"{message}: {tail}"
            raise ExtractionError(message, returncode=result.returncode, stderr=stderr[-2000:])

        if not os.path.exists(output_path):
            raise ExtractionError(f"{self.ffmpeg_binary} produced no output file", returncode=0)

        return output_path


def _remove_output(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
