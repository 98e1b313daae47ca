"""
artifacts.py

Temporary files produced by one pipeline stage and consumed by the next.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ArtifactKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class VideoInfo:
    """Metadata of the downloaded media, as reported by the resolver."""

    video_id: str
    title: str
    format_id: str
    ext: str


@dataclass
class MediaArtifact:
    """
    A file on local ephemeral storage plus its kind.

    Attributes:
        path: Absolute path of the file
        kind: Whether the file holds the downloaded video or the extracted audio
        metadata: Resolver metadata, only set for video artifacts
    """

    path: str
    kind: ArtifactKind
    metadata: Optional[VideoInfo] = None

    def release(self) -> None:
        """Delete the file. Releasing an already-deleted artifact is a no-op."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return
        logger.debug("Deleted temporary %s file: %s", self.kind.value, self.path)
