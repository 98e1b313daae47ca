import json
import os

import pytest

from video_transcriber import main as cli
from video_transcriber.errors import NoAudioFormatError


@pytest.fixture()
def run_cli(monkeypatch, download_dir, make_pipeline):
    """Run the CLI against a fake pipeline; returns (exit code, pipeline)."""

    def _run(argv, **pipeline_kwargs):
        pipeline = make_pipeline(**pipeline_kwargs)
        monkeypatch.setenv("TRANSCRIBER_DOWNLOAD_DIR", download_dir)
        monkeypatch.setattr(cli, "create_pipeline", lambda settings: pipeline)
        return cli.main(argv)

    return _run


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (42.9, "42s"), (155, "2m 35s"), (4523, "1h 15m 23s")],
)
def test_format_duration(seconds, expected):
    assert cli.format_duration(seconds) == expected


def test_load_urls_skips_blanks_and_comments(tmp_path):
    urls_file = tmp_path / "urls.txt"
    urls_file.write_text("# queue\nhttps://youtu.be/a\n\n  https://youtu.be/b  \n#https://youtu.be/c\n", encoding="utf-8")

    assert cli.load_urls(str(urls_file)) == ["https://youtu.be/a", "https://youtu.be/b"]
    assert cli.load_urls(str(tmp_path / "missing.txt")) == []


def test_main_prints_transcript(run_cli, capsys, download_dir):
    code = run_cli(["https://youtu.be/valid123", "--mode", "summary"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Summary: hello world" in out
    assert "Successful: 1" in out
    assert os.listdir(download_dir) == []


def test_main_saves_json(run_cli, tmp_path):
    output_dir = tmp_path / "out"

    code = run_cli(["https://youtu.be/valid123", "--language", "de", "--output-dir", str(output_dir)])

    assert code == 0
    [saved] = list(output_dir.iterdir())
    data = json.loads(saved.read_text(encoding="utf-8"))
    assert data["url"] == "https://youtu.be/valid123"
    assert data["title"] == "Video valid123"
    assert data["language"] == "de"
    assert data["mode"] == "normal"
    assert data["text"] == "hello world"
    assert saved.name == f"{data['id']}.json"


def test_main_reads_urls_file_and_reports_failures(run_cli, tmp_path, capsys):
    urls_file = tmp_path / "urls.txt"
    urls_file.write_text("https://youtu.be/a\nhttps://youtu.be/b\n", encoding="utf-8")

    code = run_cli(["--urls-file", str(urls_file)], fetch_error=NoAudioFormatError())

    assert code == 1
    out = capsys.readouterr().out
    assert out.count("failed to download video: no formats with audio found") == 2
    assert "Failed: 2" in out


def test_main_without_urls(run_cli, capsys):
    assert run_cli([]) == 1
    assert "No URLs given" in capsys.readouterr().out


@pytest.mark.parametrize(
    "name, value",
    [("FFMPEG_TIMEOUT", "soon"), ("DOWNLOAD_SOCKET_TIMEOUT", "-1"), ("LOG_LEVEL", "chatty")],
)
def test_main_reports_invalid_configuration(run_cli, monkeypatch, capsys, name, value):
    monkeypatch.setenv(name, value)

    code = run_cli(["https://youtu.be/valid123"])

    assert code == 1
    out = capsys.readouterr().out
    assert "Invalid configuration" in out
    assert name in out
