"""Deterministic stand-ins for the external collaborators."""

import json
from typing import Optional, Union

import numpy as np

from domain.models import AudioStream, ChunkProgress, GenerationRequest
from ports.audio import AudioDecoderPort
from ports.generation import GenerationPort
from ports.progress import ProgressPort


class ScriptedGeneration(GenerationPort):
    """Returns queued responses in order; queued exceptions are raised."""

    def __init__(self, responses: list[Union[str, Exception]]):
        self._responses = list(responses)
        self.requests: list[GenerationRequest] = []

    def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("Unexpected generation request")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class StaticDecoder(AudioDecoderPort):
    def __init__(self, stream: Optional[AudioStream] = None, error: Optional[Exception] = None):
        self._stream = stream
        self._error = error
        self.calls = 0

    def decode(self, input_path: str) -> AudioStream:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._stream


class RecordingProgress(ProgressPort):
    def __init__(self):
        self.stages: list[str] = []
        self.events: list[ChunkProgress] = []

    def report(self, job_id: str, stage: str, progress: Optional[ChunkProgress] = None) -> None:
        if progress is None:
            self.stages.append(stage)
        else:
            self.events.append(progress)


def make_stream(duration: float, sample_rate: int = 100, channels: int = 1) -> AudioStream:
    frames = int(round(duration * sample_rate))
    t = np.arange(frames, dtype=np.float32) / sample_rate
    samples = np.stack([0.5 * np.sin(2 * np.pi * (c + 1) * t) for c in range(channels)]).astype(np.float32)
    return AudioStream(sample_rate=sample_rate, samples=samples)


def segments_json(*items: tuple) -> str:
    """segments_json((0.0, "Speaker 1", "hi"), ...) -> JSON array text."""
    return json.dumps([
        {"startSeconds": start, "speaker": speaker, "text": text}
        for start, speaker, text in items
    ])


ANALYSIS_PAYLOAD = {
    "overview": {
        "topic": "Quarterly planning",
        "dateTime": "[Unspecified]",
        "location": "[Unspecified]",
        "attendees": ["Alice (Host)", "Bob"],
    },
    "mainObjectives": ["Agree on Q3 priorities"],
    "discussionSummary": "## Roadmap\n* Reviewed open items",
    "decisions": [{"decision": "Ship the importer in July"}],
    "actionItems": [
        {"task": "Draft release notes", "owner": "Bob", "collaborators": None, "deadline": None, "notes": None},
    ],
    "pendingIssues": ["Budget for contractors"],
    "notesAndReferences": ["Alice suggested a hackathon (not agreed)"],
}
