"""ThreadJobAdapter — runs jobs on a background thread pool."""

import logging
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from domain.cancellation import CancellationToken
from domain.errors import RunCancelled
from ports.job_queue import (
    JobQueuePort, JOB_CANCELLED, JOB_COMPLETED, JOB_FAILED, JOB_PENDING, JOB_RUNNING, JOB_UNKNOWN,
    DEFAULT_RETENTION_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass
class _Job:
    token: CancellationToken = field(default_factory=CancellationToken)
    started: threading.Event = field(default_factory=threading.Event)
    future: Optional[Future] = None
    finished_at: Optional[float] = None


class ThreadJobAdapter(JobQueuePort):
    """Keeps the calling thread or event loop free while a job runs.

    Each job gets its own CancellationToken; cancel() only sets it, and the job
    is expected to check it at safe points. A cancelled job that is still
    queued still runs, so its own cleanup happens, but it should stop at its
    first check.

    Finished jobs are kept for ``retention_seconds`` and then evicted on the
    next submit(); ``on_evict`` is called with each evicted job ID.
    """

    def __init__(
        self,
        max_workers: int = 1,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        on_evict: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="scribe-job")
        self._jobs: dict[str, _Job] = {}
        self._lock = threading.Lock()
        self._retention = retention_seconds
        self._on_evict = on_evict
        self._clock = clock

    def submit(self, func: Any, *args, **kwargs) -> str:
        self.evict_expired()
        job_id = uuid.uuid4().hex[:12]
        job = _Job()

        def _run():
            job.started.set()
            try:
                return func(job_id, job.token, *args, **kwargs)
            finally:
                job.finished_at = self._clock()

        with self._lock:
            job.future = self._executor.submit(_run)
            self._jobs[job_id] = job
        logger.info(f"[{job_id}] Job submitted")
        return job_id

    def status(self, job_id: str) -> str:
        job = self._get(job_id)
        if job is None:
            return JOB_UNKNOWN
        if not job.future.done():
            return JOB_RUNNING if job.started.is_set() else JOB_PENDING
        if job.future.cancelled() or isinstance(job.future.exception(), RunCancelled):
            return JOB_CANCELLED
        if job.future.exception() is not None:
            return JOB_FAILED
        return JOB_COMPLETED

    def result(self, job_id: str) -> Optional[Any]:
        job = self._get(job_id)
        if job is None or self.status(job_id) != JOB_COMPLETED:
            return None
        return job.future.result()

    def error(self, job_id: str) -> Optional[BaseException]:
        job = self._get(job_id)
        if job is None or not job.future.done() or job.future.cancelled():
            return None
        return job.future.exception()

    def cancel(self, job_id: str) -> bool:
        job = self._get(job_id)
        if job is None or job.future.done():
            return False
        job.token.cancel()
        logger.info(f"[{job_id}] Cancellation requested")
        return True

    def evict_expired(self) -> list[str]:
        """Drop jobs that finished more than retention_seconds ago."""
        cutoff = self._clock() - self._retention
        with self._lock:
            expired = [
                job_id for job_id, job in self._jobs.items()
                if job.finished_at is not None and job.finished_at <= cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        for job_id in expired:
            if self._on_evict:
                self._on_evict(job_id)
        if expired:
            logger.info(f"Evicted {len(expired)} finished job(s)")
        return expired

    def wait(self, job_id: str, timeout: Optional[float] = None) -> None:
        """Block until the job finishes. Exceptions stay recorded on the job."""
        job = self._get(job_id)
        if job is not None:
            wait_futures([job.future], timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _get(self, job_id: str) -> Optional[_Job]:
        with self._lock:
            return self._jobs.get(job_id)
