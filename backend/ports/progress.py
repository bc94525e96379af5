"""ProgressPort — abstract interface for reporting pipeline progress."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import ChunkProgress


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: Optional[ChunkProgress] = None,
    ) -> None:
        """Report progress. stage: decoding, transcribing, done."""
