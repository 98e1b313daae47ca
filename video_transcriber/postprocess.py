"""
postprocess.py

Mode-dependent transformation of the raw transcript.
"""

from enum import Enum
from typing import Union

SUMMARY_PREFIX = "Summary: "


class Mode(str, Enum):
    NORMAL = "normal"
    DETAILED = "detailed"
    SUMMARY = "summary"


def parse_mode(value: Union[str, Mode, None]) -> Mode:
    """Map a caller-supplied mode string to a Mode; unrecognized values become NORMAL."""
    if isinstance(value, Mode):
        return value
    try:
        return Mode(value)
    except ValueError:
        return Mode.NORMAL


def process_transcription(text: str, mode: Union[str, Mode, None]) -> str:
    """
    Apply post-processing based on the selected mode.

    Args:
        text: Raw transcript
        mode: "normal", "detailed" or "summary"; anything else is treated as "normal"

    Returns:
        str: The transformed transcript
    """
    mode = parse_mode(mode)

    if mode is Mode.DETAILED:
        # TODO: annotate with timestamps and speakers once backends return segments
        return text
    if mode is Mode.SUMMARY:
        return SUMMARY_PREFIX + text
    return text
