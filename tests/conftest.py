from __future__ import annotations

import os

import pytest

from video_transcriber import config, downloader
from video_transcriber.artifacts import ArtifactKind, MediaArtifact, VideoInfo
from video_transcriber.extractor import AudioEncoder, audio_path_for
from video_transcriber.pipeline import TranscriptionPipeline
from video_transcriber.transcriber import BaseTranscriber


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda *a, **k: False)


@pytest.fixture()
def download_dir(tmp_path) -> str:
    path = tmp_path / "transcriber-downloads"
    path.mkdir()
    return str(path)


@pytest.fixture()
def fake_ydl(monkeypatch):
    """Replace yt_dlp.YoutubeDL with a configurable in-memory double."""

    class FakeYoutubeDL:
        info: dict | None = None
        extract_error: Exception | None = None
        download_error: Exception | None = None
        payload = b"fake video bytes"
        instances: list = []
        downloads: list = []

        def __init__(self, params=None):
            self.params = params or {}
            FakeYoutubeDL.instances.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def extract_info(self, url, download=False):
            if FakeYoutubeDL.extract_error is not None:
                raise FakeYoutubeDL.extract_error
            return FakeYoutubeDL.info

        def process_ie_result(self, info, download=True):
            path = self.params["outtmpl"].replace("%%", "%")
            FakeYoutubeDL.downloads.append((self.params["format"], path))
            if FakeYoutubeDL.download_error is not None:
                with open(path + ".part", "wb") as f:
                    f.write(b"partial")
                raise FakeYoutubeDL.download_error
            with open(path, "wb") as f:
                f.write(FakeYoutubeDL.payload)
            return info

    FakeYoutubeDL.instances = []
    FakeYoutubeDL.downloads = []
    monkeypatch.setattr(downloader.yt_dlp, "YoutubeDL", FakeYoutubeDL)
    return FakeYoutubeDL


class FakeFetcher:
    """Writes the URL into a per-job file instead of downloading."""

    def __init__(self, download_dir: str, error: Exception | None = None):
        self.download_dir = download_dir
        self.error = error

    def fetch(self, url, job_id=None):
        if self.error is not None:
            raise self.error
        video_id = url.rstrip("/").rsplit("/", 1)[-1]
        path = os.path.join(self.download_dir, f"{video_id}-{job_id}.mp4")
        with open(path, "w", encoding="utf-8") as f:
            f.write(url)
        info = VideoInfo(video_id=video_id, title=f"Video {video_id}", format_id="18", ext="mp4")
        return MediaArtifact(path=path, kind=ArtifactKind.VIDEO, metadata=info)


class CopyEncoder(AudioEncoder):
    """Copies the input file to the deterministic audio path."""

    def __init__(self, error: Exception | None = None):
        self.error = error

    def encode_to_mono_pcm16k(self, input_path):
        if self.error is not None:
            raise self.error
        output_path = audio_path_for(input_path)
        with open(input_path, "rb") as src, open(output_path, "wb") as dst:
            dst.write(src.read())
        return output_path


class StaticTranscriber(BaseTranscriber):
    """Returns fixed text and records which files existed while transcribing."""

    def __init__(self, text: str = "hello world", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list = []
        self.seen_files: list = []

    def transcribe(self, audio_path, language):
        self.calls.append((audio_path, language))
        self.seen_files = sorted(os.listdir(os.path.dirname(audio_path)))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture()
def make_pipeline(download_dir):
    def _make(fetch_error=None, extract_error=None, transcriber=None):
        return TranscriptionPipeline(
            fetcher=FakeFetcher(download_dir, error=fetch_error),
            encoder=CopyEncoder(error=extract_error),
            transcriber=transcriber or StaticTranscriber(),
        )

    return _make


@pytest.fixture()
def static_transcriber():
    return StaticTranscriber
