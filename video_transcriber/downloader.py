"""
downloader.py

Wrapper for yt-dlp to resolve a video URL and download a stream that carries audio.
"""

import logging
import os
import uuid
from typing import Any, Dict, Iterable, Optional

import yt_dlp
from yt_dlp.utils import YoutubeDLError, sanitize_filename

from .artifacts import ArtifactKind, MediaArtifact, VideoInfo
from .errors import DownloadError, NoAudioFormatError, ResolutionError

logger = logging.getLogger(__name__)


def has_audio(fmt: Dict[str, Any]) -> bool:
    """
    Whether a yt-dlp format dictionary may carry an audio channel.

    yt-dlp reports a missing track as acodec "none" (or zero audio_channels);
    acodec None only means the codec is unknown, as for direct media links.
    """
    if fmt.get("audio_channels") == 0:
        return False
    return fmt.get("acodec") != "none"


def select_audio_format(formats: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the first audio-capable format, in the order the resolver returned them.

    No quality ranking is applied.

    Args:
        formats: Format dictionaries from yt-dlp's info dict

    Returns:
        Optional[Dict]: The selected format, or None if no format carries audio
    """
    for fmt in formats:
        if has_audio(fmt):
            return fmt
    return None


def _remove_partial(path: str) -> None:
    for candidate in (path, path + ".part", path + ".ytdl"):
        try:
            os.remove(candidate)
        except FileNotFoundError:
            continue


class MediaFetcher:
    """
    Resolves video URLs and downloads one audio-capable stream per call.

    Every downloaded file is named after the video id and a per-job token, so
    concurrent jobs never write to the same path.
    """

    def __init__(self, download_dir: str, socket_timeout: float = 30.0):
        """
        Args:
            download_dir: Shared temporary directory for downloaded files
            socket_timeout: Network socket timeout passed to yt-dlp, in seconds
        """
        self.download_dir = download_dir

        # player_client: try android/mweb to reduce HTTP 403 (YouTube often blocks default client)
        # retries are disabled: a failed transfer fails the job
        self._ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'noprogress': True,
            'noplaylist': True,
            'socket_timeout': socket_timeout,
            'retries': 0,
            'fragment_retries': 0,
            'extractor_retries': 0,
            'extractor_args': {
                'youtube': {'player_client': ['android', 'mweb']},
            },
        }

    def resolve(self, url: str) -> Dict[str, Any]:
        """
        Resolve a URL to its yt-dlp info dict without downloading anything.

        Raises:
            ResolutionError: If the URL is invalid or the resource cannot be located
        """
        try:
            with yt_dlp.YoutubeDL(dict(self._ydl_opts)) as ydl:
                info = ydl.extract_info(url, download=False)
        except (YoutubeDLError, OSError) as e:
            raise ResolutionError(f"could not resolve {url}: {e}") from e

        if not info:
            raise ResolutionError(f"no media found at {url}")
        if info.get('_type') == 'playlist':
            raise ResolutionError(f"{url} is a playlist, not a single video")
        return info

    def fetch(self, url: str, job_id: Optional[str] = None) -> MediaArtifact:
        """
        Download the first audio-capable stream of a video.

        Args:
            url: Video URL
            job_id: Token making the output filename unique (random if omitted)

        Returns:
            MediaArtifact: The downloaded video file

        Raises:
            ResolutionError: If the URL cannot be resolved
            NoAudioFormatError: If no format carries audio
            DownloadError: If the transfer fails or produces an empty file
        """
        info = self.resolve(url)

        fmt = select_audio_format(info.get('formats') or [info])
        if fmt is None:
            raise NoAudioFormatError()

        video_id = sanitize_filename(str(info.get('id') or 'video'), restricted=True)
        format_id = str(fmt.get('format_id') or 'best')
        ext = fmt.get('ext') or 'mp4'
        output_path = os.path.join(self.download_dir, f"{video_id}-{job_id or uuid.uuid4().hex}.{ext}")

        logger.info("Downloading %s (format %s) to %s", url, format_id, output_path)
        self._download(info, format_id, output_path)

        metadata = VideoInfo(
            video_id=str(info.get('id') or video_id),
            title=info.get('title') or 'Unknown Title',
            format_id=format_id,
            ext=ext,
        )
        logger.info("Video downloaded successfully: %s (%s)", output_path, metadata.title)
        return MediaArtifact(path=output_path, kind=ArtifactKind.VIDEO, metadata=metadata)

    def _download(self, info: Dict[str, Any], format_id: str, output_path: str) -> None:
        ydl_opts = dict(self._ydl_opts)
        ydl_opts.update({
            'format': format_id,
            # outtmpl is a template; escape literal percent signs in the path
            'outtmpl': output_path.replace('%', '%%'),
        })

        try:
            os.makedirs(self.download_dir, exist_ok=True)
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                ydl.process_ie_result(info, download=True)
        except (YoutubeDLError, OSError) as e:
            _remove_partial(output_path)
            raise DownloadError(str(e)) from e

        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            _remove_partial(output_path)
            raise DownloadError(f"download produced no data for format {format_id}")
