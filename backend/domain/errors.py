"""Error taxonomy for the transcription and analysis pipeline."""

from enum import Enum
from typing import Optional


class PipelineError(Exception):
    """Base class for every failure that ends a run."""


class DecodeError(PipelineError):
    """Input could not be decoded into audio samples. Never retried."""


class TransmissionError(PipelineError):
    """Network or service failure while talking to the generation service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransmissionTimeout(TransmissionError):
    """An external call exceeded its bounded wait."""


class RunCancelled(PipelineError):
    """The caller asked the run to stop."""


class EmptyTranscriptError(PipelineError):
    """The run finished without producing a single segment."""


class ExtractionErrorKind(str, Enum):
    NO_ROOT_FOUND = "no_root_found"
    UNRECOVERABLE_TRUNCATION = "unrecoverable_truncation"
    SYNTAX_ERROR = "syntax_error"
    SCHEMA_MISMATCH = "schema_mismatch"


_MESSAGES = {
    ExtractionErrorKind.NO_ROOT_FOUND:
        "The AI response did not contain the expected JSON {root}.",
    ExtractionErrorKind.UNRECOVERABLE_TRUNCATION:
        "The AI response appears to have been truncated, leading to a JSON parsing error. "
        "This can happen with very long audio files. Please try again with a smaller file.",
    ExtractionErrorKind.SYNTAX_ERROR:
        "The AI response contained a JSON syntax error and could not be parsed.",
    ExtractionErrorKind.SCHEMA_MISMATCH:
        "The AI response was valid JSON but did not match the expected {root} structure.",
}


class ExtractionError(PipelineError):
    """The service response could not be turned into a valid JSON value."""

    def __init__(
        self,
        kind: ExtractionErrorKind,
        raw_text: str,
        salvaged_text: Optional[str] = None,
        root: str = "object",
        detail: Optional[str] = None,
    ):
        self.kind = kind
        self.raw_text = raw_text
        self.salvaged_text = salvaged_text
        self.root = root
        self.detail = detail
        super().__init__(self.message)

    @property
    def is_truncation(self) -> bool:
        return self.kind == ExtractionErrorKind.UNRECOVERABLE_TRUNCATION

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind].format(root=self.root)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message
