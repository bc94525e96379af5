"""Domain <-> DTO mappers.

Converts between TranscriptSegment (domain) and TranscriptSegmentDTO (Pydantic).
"""

from domain.models import ChunkProgress, TranscriptSegment
from models import ChunkProgressDTO, TranscriptSegmentDTO


def segment_to_dto(seg: TranscriptSegment) -> TranscriptSegmentDTO:
    return TranscriptSegmentDTO(start_time=seg.start_time, speaker=seg.speaker, text=seg.text)


def dto_to_segment(dto: TranscriptSegmentDTO) -> TranscriptSegment:
    return TranscriptSegment(start_time=dto.start_time, speaker=dto.speaker or "", text=dto.text)


def segments_to_dtos(segments: list[TranscriptSegment]) -> list[TranscriptSegmentDTO]:
    """Convert a list of domain segments to DTOs, preserving order."""
    return [segment_to_dto(seg) for seg in segments]


def dtos_to_segments(dtos: list[TranscriptSegmentDTO]) -> list[TranscriptSegment]:
    return [dto_to_segment(dto) for dto in dtos]


def progress_to_dto(progress: ChunkProgress) -> ChunkProgressDTO:
    return ChunkProgressDTO(chunk_index=progress.chunk_index, total_chunks=progress.total_chunks)
