"""Transcript helpers applied after a run, while the transcript is reviewed.

Functions for speaker relabelling and the two plain-text renderings of a
transcript: the bare text sent for analysis and the annotated listing.
"""

import logging
from typing import Dict, Sequence

from domain.models import TranscriptSegment

logger = logging.getLogger(__name__)


def transcript_to_text(segments: Sequence[TranscriptSegment]) -> str:
    """Join segment text one line per segment, the form sent for analysis."""
    return "\n".join(seg.text for seg in segments)


def format_transcript(segments: Sequence[TranscriptSegment]) -> str:
    """Render segments as "[Speaker] [HH:MM:SS] text" lines.

    The speaker tag is omitted for segments without a speaker label.
    """
    lines = []
    for seg in segments:
        prefix = f"[{seg.speaker}] " if seg.speaker else ""
        lines.append(f"{prefix}[{seg.start_time}] {seg.text}")
    return "\n".join(lines)


def apply_speaker_labels(segments: list, labels: Dict[str, str]) -> list:
    """Rename speaker labels using a user-supplied mapping.

    Args:
        segments: List of TranscriptSegment objects.
        labels: Mapping of original label to custom name,
                e.g. {"Speaker 1": "Alice"}.

    Returns:
        The same segments list with speakers renamed in-place.
    """
    renamed = 0
    for seg in segments:
        if seg.speaker and seg.speaker in labels:
            seg.speaker = labels[seg.speaker]
            renamed += 1
    if renamed:
        logger.info(f"Renamed speaker on {renamed} segment(s)")
    return segments
