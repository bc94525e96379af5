from domain.models import TranscriptSegment
from post_processing import apply_speaker_labels, format_transcript, transcript_to_text


def _segments():
    return [
        TranscriptSegment(start_time="00:00:01", speaker="Speaker 1", text="Hello"),
        TranscriptSegment(start_time="00:00:04", speaker="", text="(inaudible)"),
        TranscriptSegment(start_time="00:01:10", speaker="Speaker 2", text="Hi"),
    ]


def test_transcript_to_text():
    assert transcript_to_text(_segments()) == "Hello\n(inaudible)\nHi"


def test_format_transcript_omits_empty_speaker():
    assert format_transcript(_segments()).splitlines() == [
        "[Speaker 1] [00:00:01] Hello",
        "[00:00:04] (inaudible)",
        "[Speaker 2] [00:01:10] Hi",
    ]


def test_apply_speaker_labels():
    segments = apply_speaker_labels(_segments(), {"Speaker 1": "Alice"})
    assert [s.speaker for s in segments] == ["Alice", "", "Speaker 2"]
