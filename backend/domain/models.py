"""Framework-agnostic domain models for Meeting Scribe.

These are plain dataclasses used by the pipeline internals. Pydantic DTOs in
models.py stay at the HTTP boundary, with mappers in between.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np


@dataclass(frozen=True)
class AudioStream:
    """Decoded audio: one float32 buffer per channel, all of equal length.

    ``samples`` has shape (channels, frames). Created once by the decoder and
    never mutated afterwards.
    """
    sample_rate: int
    samples: np.ndarray

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.samples.ndim != 2 or self.samples.shape[0] < 1:
            raise ValueError(f"samples must have shape (channels, frames), got {self.samples.shape}")
        # Read-only view; the caller keeps a writable buffer
        view = self.samples.view()
        view.setflags(write=False)
        object.__setattr__(self, "samples", view)

    @property
    def num_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def num_frames(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.num_frames / self.sample_rate

    def frame_range(self, start: float, end: float) -> tuple[int, int]:
        """Map a [start, end) window in seconds onto frame indices."""
        first = min(int(math.floor(start * self.sample_rate)), self.num_frames)
        last = min(int(math.floor(end * self.sample_rate)), self.num_frames)
        return first, max(first, last)


@dataclass(frozen=True)
class ChunkWindow:
    """A [start, end) slice of the global timeline, in seconds."""
    index: int
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class EncodedChunk:
    """Self-contained audio payload for one request. Never persisted."""
    data: bytes
    mime_type: str = "audio/wav"
    duration: float = 0.0


@dataclass
class RawSegment:
    """Untrusted segment as returned by the transcription service.

    Fields are kept as Any until validated by the reconciler.
    """
    start_seconds: Any
    speaker: Any
    text: Any


@dataclass
class TranscriptSegment:
    """A transcript line on the global timeline (start formatted HH:MM:SS)."""
    start_time: str
    text: str
    speaker: str = ""


@dataclass(frozen=True)
class ChunkProgress:
    """Progress notification emitted after each completed chunk."""
    chunk_index: int
    total_chunks: int

    @property
    def fraction(self) -> float:
        return self.chunk_index / self.total_chunks if self.total_chunks else 0.0


@dataclass
class GenerationRequest:
    """One logical call to the text-generation service."""
    prompt: str
    system_instruction: str
    response_schema: dict
    language: str = "en"
    media: Optional[EncodedChunk] = None
    response_mime_type: str = "application/json"


class RunState(str, Enum):
    IDLE = "idle"
    DECODING = "decoding"
    CHUNK_PROCESSING = "chunk_processing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class TranscriptionRun:
    """Outcome of one orchestrated transcription."""
    segments: list[TranscriptSegment] = field(default_factory=list)
    state: RunState = RunState.IDLE
    total_chunks: int = 0
    chunks_processed: int = 0
    dropped_segments: int = 0
    duration: float = 0.0
    error: Optional[Exception] = None

    @property
    def is_empty(self) -> bool:
        return not self.segments
