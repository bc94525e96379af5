import math

import pytest

from domain.models import RawSegment
from domain.reconcile import (
    reconcile_segments, seconds_to_timestamp, timestamp_to_seconds,
)


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00:00"),
    (59.99, "00:00:59"),
    (68.2, "00:01:08"),
    (3600, "01:00:00"),
    (36610.5, "10:10:10"),
    (-1, "00:00:00"),
    (math.nan, "00:00:00"),
])
def test_seconds_to_timestamp(seconds, expected):
    assert seconds_to_timestamp(seconds) == expected


def test_timestamp_to_seconds():
    assert timestamp_to_seconds("00:10:10") == 610
    assert timestamp_to_seconds("01:08") == 68
    with pytest.raises(ValueError):
        timestamp_to_seconds("1:2:3:4")


def test_offset_is_added_to_relative_start():
    segments, dropped = reconcile_segments(
        [{"startSeconds": 3.2, "speaker": "Speaker 1", "text": "Hello"}], offset=65,
    )
    assert dropped == 0
    assert segments[0].start_time == "00:01:08"
    assert segments[0].speaker == "Speaker 1"
    assert segments[0].text == "Hello"


def test_invalid_segment_dropped_and_order_kept():
    raw = [
        {"startSeconds": 1, "speaker": "Speaker 1", "text": "first"},
        {"startSeconds": "abc", "speaker": "Speaker 2", "text": "bad offset"},
        {"startSeconds": 5, "speaker": "Speaker 2", "text": "second"},
        {"startSeconds": 9, "speaker": "Speaker 1", "text": "third"},
    ]
    segments, dropped = reconcile_segments(raw, offset=0)
    assert dropped == 1
    assert [s.text for s in segments] == ["first", "second", "third"]


@pytest.mark.parametrize("item", [
    {"startSeconds": None, "speaker": "S", "text": "t"},
    {"startSeconds": -2, "speaker": "S", "text": "t"},
    {"startSeconds": float("inf"), "speaker": "S", "text": "t"},
    {"startSeconds": True, "speaker": "S", "text": "t"},
    {"startSeconds": 1, "text": "missing speaker"},
    {"startSeconds": 1, "speaker": "S"},
    {"startSeconds": 1, "speaker": "S", "text": 42},
    "not an object",
])
def test_structurally_invalid_segments(item):
    segments, dropped = reconcile_segments([item], offset=0)
    assert segments == []
    assert dropped == 1


def test_empty_speaker_is_accepted():
    segments, _ = reconcile_segments([{"startSeconds": 0, "speaker": "", "text": "x"}], offset=0)
    assert segments[0].speaker == ""


def test_accepts_raw_segment_instances():
    segments, _ = reconcile_segments([RawSegment(start_seconds=10, speaker="A", text="x")], offset=600)
    assert segments[0].start_time == "00:10:10"
