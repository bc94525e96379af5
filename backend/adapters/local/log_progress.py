"""LogProgressAdapter — reports progress via logging."""

import logging
from typing import Optional

from domain.models import ChunkProgress
from ports.progress import ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def report(
        self,
        job_id: str,
        stage: str,
        progress: Optional[ChunkProgress] = None,
    ) -> None:
        msg = f"[{job_id}] {stage}"
        if progress:
            msg += f" {progress.fraction:.0%} - chunk {progress.chunk_index}/{progress.total_chunks}"
        logger.info(msg)
