"""InMemoryProgressAdapter — keeps the latest stage and chunk progress per job."""

import threading
from typing import Optional

from domain.models import ChunkProgress
from ports.progress import ProgressPort


class InMemoryProgressAdapter(ProgressPort):
    """Remembers the last report per job and forwards it to an optional delegate."""

    def __init__(self, delegate: Optional[ProgressPort] = None):
        self._delegate = delegate
        self._lock = threading.Lock()
        self._stages: dict[str, str] = {}
        self._progress: dict[str, ChunkProgress] = {}

    def report(
        self,
        job_id: str,
        stage: str,
        progress: Optional[ChunkProgress] = None,
    ) -> None:
        with self._lock:
            self._stages[job_id] = stage
            if progress is not None:
                self._progress[job_id] = progress
        if self._delegate:
            self._delegate.report(job_id, stage, progress)

    def stage(self, job_id: str) -> Optional[str]:
        with self._lock:
            return self._stages.get(job_id)

    def latest(self, job_id: str) -> Optional[ChunkProgress]:
        with self._lock:
            return self._progress.get(job_id)

    def forget(self, job_id: str) -> None:
        with self._lock:
            self._stages.pop(job_id, None)
            self._progress.pop(job_id, None)
