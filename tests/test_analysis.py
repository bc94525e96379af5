import json

import pytest

from domain.errors import EmptyTranscriptError, ExtractionError, ExtractionErrorKind, TransmissionError
from domain.models import TranscriptSegment
from gateways.analysis import AnalysisGateway
from use_cases.analyze import AnalyzeRequest, AnalyzeTranscriptUseCase
from fakes import ANALYSIS_PAYLOAD, ScriptedGeneration


def test_parses_object_wrapped_in_fences():
    generation = ScriptedGeneration(["```json\n" + json.dumps(ANALYSIS_PAYLOAD) + "\n```"])
    result = AnalysisGateway(generation).analyze("Alice: let's ship in July.", "en")

    assert result.overview.topic == "Quarterly planning"
    assert result.overview.attendees == ["Alice (Host)", "Bob"]
    assert result.decisions[0].decision == "Ship the importer in July"
    item = result.action_items[0]
    assert item.owner == "Bob"
    assert item.deadline is None
    assert result.model_dump(by_alias=True)["notesAndReferences"] == ANALYSIS_PAYLOAD["notesAndReferences"]


def test_request_carries_transcript_hint_and_rules():
    generation = ScriptedGeneration([json.dumps(ANALYSIS_PAYLOAD)])
    AnalysisGateway(generation).analyze("the transcript body", "en", hint="Bob is the CFO")

    request = generation.requests[0]
    assert request.media is None
    assert request.response_schema["type"] == "OBJECT"
    assert "the transcript body" in request.prompt
    assert "Bob is the CFO" in request.prompt
    assert "NOT a decision" in request.prompt
    assert "null" in request.prompt
    assert "JSON" in request.system_instruction


def test_no_hint_section_without_hint():
    generation = ScriptedGeneration([json.dumps(ANALYSIS_PAYLOAD)])
    AnalysisGateway(generation).analyze("text", "en", hint="   ")
    assert "ADDITIONAL GUIDANCE" not in generation.requests[0].prompt


def test_truncated_object_fails_as_truncation():
    truncated = '{"overview": {"topic": "Quarterly planning", "attendees": ["Al'
    generation = ScriptedGeneration([truncated])
    with pytest.raises(ExtractionError) as exc_info:
        AnalysisGateway(generation).analyze("text", "en")
    assert exc_info.value.is_truncation


def test_wrong_shape_is_schema_mismatch():
    generation = ScriptedGeneration(['{"overview": {"topic": "x"}}'])
    with pytest.raises(ExtractionError) as exc_info:
        AnalysisGateway(generation).analyze("text", "en")
    assert exc_info.value.kind == ExtractionErrorKind.SCHEMA_MISMATCH


def test_transmission_error_propagates():
    generation = ScriptedGeneration([TransmissionError("down")])
    with pytest.raises(TransmissionError):
        AnalysisGateway(generation).analyze("text", "en")


def test_use_case_joins_segment_text():
    generation = ScriptedGeneration([json.dumps(ANALYSIS_PAYLOAD)])
    use_case = AnalyzeTranscriptUseCase(AnalysisGateway(generation))
    segments = [
        TranscriptSegment(start_time="00:00:01", speaker="A", text="first line"),
        TranscriptSegment(start_time="00:00:05", speaker="B", text="second line"),
    ]
    use_case.execute(AnalyzeRequest(transcript=segments, language="vi"))
    assert "first line\nsecond line" in generation.requests[0].prompt
    assert "BẢN GHI CUỘC HỌP" in generation.requests[0].prompt


def test_use_case_rejects_empty_transcript():
    use_case = AnalyzeTranscriptUseCase(AnalysisGateway(ScriptedGeneration([])))
    with pytest.raises(EmptyTranscriptError):
        use_case.execute(AnalyzeRequest(transcript="  \n "))
