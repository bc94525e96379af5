"""Split a recording's duration into bounded, contiguous chunk windows."""

from domain.models import ChunkWindow

DEFAULT_MAX_CHUNK_SECONDS = 300.0


def plan_chunks(total_duration: float, max_chunk_seconds: float = DEFAULT_MAX_CHUNK_SECONDS) -> list[ChunkWindow]:
    """Cover [0, total_duration) with windows no longer than max_chunk_seconds.

    Boundaries are multiples of max_chunk_seconds; the last window ends exactly
    at total_duration, so a recording shorter than one chunk yields one window.
    """
    if total_duration <= 0:
        raise ValueError(f"total_duration must be positive, got {total_duration}")
    if max_chunk_seconds <= 0:
        raise ValueError(f"max_chunk_seconds must be positive, got {max_chunk_seconds}")

    windows: list[ChunkWindow] = []
    start = 0.0
    index = 0
    while start < total_duration:
        end = min((index + 1) * max_chunk_seconds, total_duration)
        windows.append(ChunkWindow(index=index, start=start, end=end))
        start = end
        index += 1
    return windows
