import pytest

from adapters.pcm.wav import PCM16WavEncoder
from domain.cancellation import CancellationToken
from domain.errors import DecodeError, ExtractionError, RunCancelled, TransmissionError
from domain.models import RunState
from gateways.transcription import TranscriptionGateway
from use_cases.transcribe import TranscribeMeetingUseCase, TranscribeRequest
from fakes import RecordingProgress, ScriptedGeneration, StaticDecoder, make_stream, segments_json


def build(responses, stream=None, decode_error=None):
    generation = ScriptedGeneration(responses)
    decoder = StaticDecoder(stream=stream, error=decode_error)
    progress = RecordingProgress()
    use_case = TranscribeMeetingUseCase(
        decoder=decoder,
        encoder=PCM16WavEncoder(),
        gateway=TranscriptionGateway(generation),
        progress=progress,
    )
    return use_case, generation, decoder, progress


def test_twelve_minute_recording_end_to_end():
    responses = [
        segments_json((0.0, "Speaker 1", "Good morning"), (42.7, "Speaker 2", "Morning")),
        segments_json((5.0, "Speaker 1", "Next item")),
        segments_json((10.0, "Speaker 2", "Wrapping up")),
    ]
    use_case, generation, decoder, progress = build(responses, stream=make_stream(720.0))
    events = []

    run = use_case.execute(
        TranscribeRequest(audio_path="meeting.mp4", chunk_duration=300),
        on_progress=events.append,
    )

    assert decoder.calls == 1
    assert run.state == RunState.DONE
    assert run.total_chunks == 3
    assert run.chunks_processed == 3
    assert run.duration == 720.0
    assert [(s.start_time, s.speaker, s.text) for s in run.segments] == [
        ("00:00:00", "Speaker 1", "Good morning"),
        ("00:00:42", "Speaker 2", "Morning"),
        ("00:05:05", "Speaker 1", "Next item"),
        ("00:10:10", "Speaker 2", "Wrapping up"),
    ]
    assert [(e.chunk_index, e.total_chunks) for e in events] == [(1, 3), (2, 3), (3, 3)]
    assert progress.events == events
    assert progress.stages == ["decoding", "chunk_processing", "done"]

    durations = [r.media.duration for r in generation.requests]
    assert durations == [300.0, 300.0, 120.0]
    assert all(r.media.mime_type == "audio/wav" for r in generation.requests)


def test_language_reaches_transcription_request():
    use_case, generation, _, _ = build(["[]"], stream=make_stream(30.0))
    use_case.execute(TranscribeRequest(audio_path="a.wav", language="vi"))
    request = generation.requests[0]
    assert request.language == "vi"
    assert "tiếng Việt" in request.prompt


def test_invalid_segment_dropped_without_failing_chunk():
    response = (
        '[{"startSeconds": 1, "speaker": "A", "text": "kept"},'
        ' {"startSeconds": "soon", "speaker": "B", "text": "dropped"},'
        ' {"startSeconds": 2, "speaker": "A", "text": "also kept"}]'
    )
    use_case, _, _, _ = build([response], stream=make_stream(60.0))
    run = use_case.execute(TranscribeRequest(audio_path="a.wav"))
    assert [s.text for s in run.segments] == ["kept", "also kept"]
    assert run.dropped_segments == 1


def test_truncated_chunk_response_is_salvaged():
    use_case, _, _, _ = build(
        ['```json\n[{"startSeconds": 1, "speaker": "A", "text": "one"}, {"startSeconds": 2, "spea'],
        stream=make_stream(60.0),
    )
    run = use_case.execute(TranscribeRequest(audio_path="a.wav"))
    assert [s.text for s in run.segments] == ["one"]


def test_empty_result_is_reported_as_empty():
    use_case, _, _, _ = build(["[]", "[]"], stream=make_stream(400.0))
    run = use_case.execute(TranscribeRequest(audio_path="a.wav"))
    assert run.state == RunState.DONE
    assert run.is_empty


def test_decode_failure_aborts_before_any_request():
    use_case, generation, _, progress = build([], decode_error=DecodeError("unsupported"))
    with pytest.raises(DecodeError):
        use_case.execute(TranscribeRequest(audio_path="a.xyz"))
    assert generation.requests == []
    assert progress.stages == ["decoding", "failed"]


def test_transmission_failure_aborts_whole_run():
    use_case, generation, _, progress = build(
        [segments_json((0, "A", "first chunk")), TransmissionError("HTTP 503", status_code=503)],
        stream=make_stream(720.0),
    )
    with pytest.raises(TransmissionError) as exc_info:
        use_case.execute(TranscribeRequest(audio_path="a.wav"))
    assert exc_info.value.status_code == 503
    assert len(generation.requests) == 2
    assert progress.stages[-1] == "failed"


def test_extraction_failure_aborts_with_first_error():
    use_case, _, _, _ = build(
        ["no speech detected, sorry", segments_json((0, "A", "never reached"))],
        stream=make_stream(720.0),
    )
    with pytest.raises(ExtractionError):
        use_case.execute(TranscribeRequest(audio_path="a.wav"))


def test_partial_policy_returns_earlier_chunks():
    use_case, _, _, _ = build(
        [segments_json((0, "A", "kept")), '[{"startSeconds": 1, "text": "x" "speaker": "B"}]'],
        stream=make_stream(720.0),
    )
    run = use_case.execute(TranscribeRequest(audio_path="a.wav", failure_policy="partial"))
    assert run.state == RunState.FAILED
    assert isinstance(run.error, ExtractionError)
    assert [s.text for s in run.segments] == ["kept"]
    assert run.chunks_processed == 1
    assert run.duration == 300.0


def test_cancellation_checked_between_chunks():
    token = CancellationToken()
    use_case, generation, _, progress = build(
        [segments_json((0, "A", "one")), segments_json((0, "A", "two")), segments_json((0, "A", "three"))],
        stream=make_stream(720.0),
    )

    def cancel_after_first(event):
        if event.chunk_index == 1:
            token.cancel()

    with pytest.raises(RunCancelled):
        use_case.execute(TranscribeRequest(audio_path="a.wav"), cancel_token=token, on_progress=cancel_after_first)
    assert len(generation.requests) == 1
    assert progress.stages[-1] == "cancelled"


def test_unknown_failure_policy():
    use_case, _, _, _ = build([], stream=make_stream(10.0))
    with pytest.raises(ValueError):
        use_case.execute(TranscribeRequest(audio_path="a.wav", failure_policy="retry"))


def test_cancelled_before_start_skips_decode():
    token = CancellationToken()
    token.cancel()
    use_case, generation, decoder, progress = build([], stream=make_stream(30.0))

    with pytest.raises(RunCancelled):
        use_case.execute(TranscribeRequest(audio_path="a.wav"), cancel_token=token)
    assert decoder.calls == 0
    assert generation.requests == []
    assert progress.stages == ["cancelled"]
