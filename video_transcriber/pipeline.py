"""
pipeline.py

Orchestrates one transcription job: fetch -> extract -> transcribe -> post-process.
Owns the temporary artifacts of the job and releases them on every exit path.
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from .artifacts import ArtifactKind, MediaArtifact, VideoInfo
from .config import Settings
from .downloader import MediaFetcher
from .errors import PipelineError
from .extractor import AudioEncoder, FFmpegEncoder
from .postprocess import Mode, parse_mode, process_transcription
from .transcriber import BaseTranscriber, get_transcriber

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"


STAGE_ERROR_PREFIXES = {
    Stage.FETCHING: "failed to download video",
    Stage.EXTRACTING: "failed to extract audio",
    Stage.TRANSCRIBING: "failed to transcribe audio",
}


@dataclass
class TranscriptionJob:
    """
    State of a single request. Created per call, discarded once the result is returned.

    Attributes:
        url: Video URL
        language: Language hint passed to the transcriber
        mode: Post-processing mode
        job_id: Random token, unique per job, used in artifact filenames
        stage: Current position in the stage sequence
        artifacts: Temporary files created so far
        video: Metadata of the downloaded video, once fetched
        text: Final result, once done
    """

    url: str
    language: str
    mode: Mode = Mode.NORMAL
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    stage: Stage = Stage.FETCHING
    artifacts: List[MediaArtifact] = field(default_factory=list)
    video: Optional[VideoInfo] = None
    text: Optional[str] = None

    def release_artifacts(self) -> None:
        """Delete every artifact of this job. Deletion failures are logged, not raised."""
        while self.artifacts:
            artifact = self.artifacts.pop()
            try:
                artifact.release()
            except OSError as e:
                logger.warning("Could not delete %s file %s: %s", artifact.kind.value, artifact.path, e)


class TranscriptionPipeline:
    """
    Runs transcription jobs against injected collaborators.

    The pipeline keeps no per-job state, so one instance can serve concurrent calls.
    """

    def __init__(self, fetcher: MediaFetcher, encoder: AudioEncoder, transcriber: BaseTranscriber):
        self.fetcher = fetcher
        self.encoder = encoder
        self.transcriber = transcriber

    def transcribe_video(self, url: str, language: str, mode: str) -> str:
        """
        Process a video URL and return its transcription.

        Args:
            url: Video URL
            language: Target language for transcription
            mode: "normal", "detailed" or "summary" (anything else behaves as "normal")

        Returns:
            str: The post-processed transcript

        Raises:
            PipelineError: If any stage fails; the message names the failing stage
        """
        job = TranscriptionJob(url=url, language=language, mode=parse_mode(mode))
        self.run(job)
        return job.text

    def run(self, job: TranscriptionJob) -> TranscriptionJob:
        """Run a job to completion, filling in job.video and job.text."""
        start = time.time()
        logger.info("Job %s: %s (language=%s, mode=%s)", job.job_id, job.url, job.language, job.mode.value)

        try:
            video = self._run_stage(job, Stage.FETCHING, self.fetcher.fetch, job.url, job.job_id)
            job.artifacts.append(video)
            job.video = video.metadata

            audio_path = self._run_stage(job, Stage.EXTRACTING, self.encoder.encode_to_mono_pcm16k, video.path)
            job.artifacts.append(MediaArtifact(path=audio_path, kind=ArtifactKind.AUDIO))

            text = self._run_stage(job, Stage.TRANSCRIBING, self.transcriber.transcribe, audio_path, job.language)
        finally:
            job.release_artifacts()

        job.stage = Stage.POST_PROCESSING
        job.text = process_transcription(text, job.mode)
        job.stage = Stage.DONE

        logger.info("Job %s done in %.1fs (%d characters)", job.job_id, time.time() - start, len(job.text))
        return job

    def _run_stage(self, job: TranscriptionJob, stage: Stage, func: Callable[..., Any], *args: Any) -> Any:
        job.stage = stage
        logger.debug("Job %s: %s", job.job_id, stage.value)
        try:
            return func(*args)
        except Exception as e:
            job.stage = Stage.FAILED
            logger.error("Job %s failed while %s: %s", job.job_id, stage.value, e)
            raise PipelineError(stage.value, STAGE_ERROR_PREFIXES[stage], e) from e


def create_pipeline(settings: Optional[Settings] = None) -> TranscriptionPipeline:
    """
    Build the production pipeline: yt-dlp fetcher, ffmpeg encoder, configured transcriber.

    Creates the shared download directory if it does not exist yet.

    Args:
        settings: Configuration; read from the environment when omitted

    Returns:
        TranscriptionPipeline: Ready-to-use pipeline
    """
    if settings is None:
        settings = Settings.from_env()

    os.makedirs(settings.download_dir, exist_ok=True)
    logger.info("Using download directory: %s", settings.download_dir)

    return TranscriptionPipeline(
        fetcher=MediaFetcher(settings.download_dir, socket_timeout=settings.socket_timeout),
        encoder=FFmpegEncoder(settings.ffmpeg_binary, timeout=settings.ffmpeg_timeout),
        transcriber=get_transcriber(settings.transcription_backend, model_size=settings.whisper_model_size),
    )
