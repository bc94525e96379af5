"""Move chunk-local segment offsets onto the global transcript timeline."""

import logging
import math
from typing import Any, Iterable, Optional

from domain.models import RawSegment, TranscriptSegment

logger = logging.getLogger(__name__)


def seconds_to_timestamp(seconds: float) -> str:
    """Format seconds as HH:MM:SS. NaN and negative values clamp to 00:00:00."""
    if seconds is None or math.isnan(seconds) or seconds < 0:
        return "00:00:00"
    total = int(seconds)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def timestamp_to_seconds(timestamp: str) -> int:
    """Inverse of seconds_to_timestamp; also accepts MM:SS and SS."""
    parts = timestamp.strip().split(":")
    if not parts or len(parts) > 3:
        raise ValueError(f"Invalid timestamp: {timestamp!r}")
    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def raw_segment_from_json(item: Any) -> Optional[RawSegment]:
    """Wrap one decoded JSON element; non-objects yield None."""
    if not isinstance(item, dict):
        return None
    return RawSegment(
        start_seconds=item.get("startSeconds"),
        speaker=item.get("speaker"),
        text=item.get("text"),
    )


def is_valid_segment(seg: RawSegment) -> bool:
    offset = seg.start_seconds
    # bool is an int subclass but never a real offset
    if isinstance(offset, bool) or not isinstance(offset, (int, float)):
        return False
    if not math.isfinite(offset) or offset < 0:
        return False
    return isinstance(seg.text, str) and isinstance(seg.speaker, str)


def reconcile_segments(
    raw_segments: Iterable[Any],
    offset: float,
    language: str = "en",
) -> tuple[list[TranscriptSegment], int]:
    """Rewrite one chunk's segments onto the global timeline.

    Invalid entries are dropped and logged; the rest keep their relative order.

    Args:
        raw_segments: Decoded JSON elements (or RawSegment) for one chunk.
        offset: Cumulative duration of all preceding chunks, in seconds.
        language: Target language, used only in log messages.

    Returns:
        (segments, dropped_count)
    """
    segments: list[TranscriptSegment] = []
    dropped = 0
    for item in raw_segments:
        seg = item if isinstance(item, RawSegment) else raw_segment_from_json(item)
        if seg is None or not is_valid_segment(seg):
            dropped += 1
            logger.warning(f"Skipping invalid segment ({language}): {item!r}")
            continue
        segments.append(TranscriptSegment(
            start_time=seconds_to_timestamp(offset + seg.start_seconds),
            speaker=seg.speaker,
            text=seg.text,
        ))
    return segments, dropped
