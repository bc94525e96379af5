from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.reconcile import seconds_to_timestamp, timestamp_to_seconds


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TranscriptSegmentDTO(CamelModel):
    """A transcript line as exposed over the API"""
    start_time: str = Field(alias="startTime")
    speaker: Optional[str] = ""
    text: str

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, value: str) -> str:
        # Edited transcripts may send "1:08" or "68"
        return seconds_to_timestamp(timestamp_to_seconds(value))


class Overview(CamelModel):
    topic: str
    date_time: str = Field(alias="dateTime")
    location: str
    attendees: List[str] = []


class Decision(CamelModel):
    decision: str


class ActionItem(CamelModel):
    """A delegable task. Unknown fields are null, never guessed."""
    task: str
    owner: Optional[str] = None
    collaborators: Optional[str] = None
    deadline: Optional[str] = None
    notes: Optional[str] = None


class AnalysisResult(CamelModel):
    """Structured meeting minutes derived from a transcript"""
    overview: Overview
    main_objectives: List[str] = Field(alias="mainObjectives")
    discussion_summary: str = Field(alias="discussionSummary")
    decisions: List[Decision]
    action_items: List[ActionItem] = Field(alias="actionItems")
    pending_issues: List[str] = Field(alias="pendingIssues")
    notes_and_references: List[str] = Field(alias="notesAndReferences")


class AnalyzeRequest(CamelModel):
    transcript: Union[str, List[TranscriptSegmentDTO]]
    language: Optional[str] = None
    hint: Optional[str] = None


class SpeakerLabelsRequest(CamelModel):
    """Speaker renames, e.g. {"Speaker 1": "Alice"}"""
    labels: Dict[str, str]


class ChunkProgressDTO(CamelModel):
    chunk_index: int = Field(alias="chunkIndex")
    total_chunks: int = Field(alias="totalChunks")


class ErrorDetail(BaseModel):
    type: str
    message: str
    kind: Optional[str] = None


class JobCreatedResponse(CamelModel):
    job_id: str = Field(alias="jobId")
    status: str


class TranscriptionResponse(CamelModel):
    """Status and, once finished, the result of a transcription job"""
    job_id: str = Field(alias="jobId")
    status: str
    stage: Optional[str] = None
    progress: Optional[ChunkProgressDTO] = None
    segments: Optional[List[TranscriptSegmentDTO]] = None
    text: Optional[str] = None
    duration: Optional[float] = None
    dropped_segments: Optional[int] = Field(default=None, alias="droppedSegments")
    error: Optional[ErrorDetail] = None
