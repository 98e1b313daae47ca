import pytest

from video_transcriber.postprocess import Mode, SUMMARY_PREFIX, parse_mode, process_transcription


@pytest.mark.parametrize("mode", ["normal", "detailed", Mode.NORMAL, Mode.DETAILED])
def test_identity_modes(mode):
    assert process_transcription("hello world", mode) == "hello world"


def test_summary_prefixes_text():
    assert process_transcription("hello world", "summary") == "Summary: hello world"
    assert process_transcription("", Mode.SUMMARY) == SUMMARY_PREFIX


@pytest.mark.parametrize("mode", ["unknown-mode", "", "SUMMARY", None])
def test_unknown_mode_falls_back_to_identity(mode):
    assert process_transcription("hello world", mode) == "hello world"


def test_unknown_mode_is_idempotent():
    once = process_transcription("text", "unknown-mode")
    assert process_transcription(once, "unknown-mode") == "text"


def test_parse_mode():
    assert parse_mode("summary") is Mode.SUMMARY
    assert parse_mode("detailed") is Mode.DETAILED
    assert parse_mode(Mode.SUMMARY) is Mode.SUMMARY
    assert parse_mode("loud") is Mode.NORMAL
