"""SyncJobAdapter — runs jobs inline."""

import time
import uuid
from typing import Any, Callable, Optional

from domain.cancellation import CancellationToken
from domain.errors import RunCancelled
from ports.job_queue import (
    JobQueuePort, JOB_CANCELLED, JOB_COMPLETED, JOB_FAILED, JOB_UNKNOWN, DEFAULT_RETENTION_SECONDS,
)


class SyncJobAdapter(JobQueuePort):
    """Executes jobs synchronously. No queue, no background processing.

    Failures are recorded rather than raised, so callers see the same
    submit-then-poll contract as with the threaded adapter, including
    eviction of old jobs.
    """

    def __init__(
        self,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        on_evict: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._status: dict[str, str] = {}
        self._results: dict[str, Any] = {}
        self._errors: dict[str, BaseException] = {}
        self._finished_at: dict[str, float] = {}
        self._retention = retention_seconds
        self._on_evict = on_evict
        self._clock = clock

    def submit(self, func: Any, *args, **kwargs) -> str:
        self.evict_expired()
        job_id = uuid.uuid4().hex[:12]
        try:
            self._results[job_id] = func(job_id, CancellationToken(), *args, **kwargs)
            self._status[job_id] = JOB_COMPLETED
        except RunCancelled as e:
            self._errors[job_id] = e
            self._status[job_id] = JOB_CANCELLED
        except Exception as e:
            self._errors[job_id] = e
            self._status[job_id] = JOB_FAILED
        self._finished_at[job_id] = self._clock()
        return job_id

    def status(self, job_id: str) -> str:
        return self._status.get(job_id, JOB_UNKNOWN)

    def result(self, job_id: str) -> Optional[Any]:
        return self._results.get(job_id)

    def error(self, job_id: str) -> Optional[BaseException]:
        return self._errors.get(job_id)

    def cancel(self, job_id: str) -> bool:
        return False

    def evict_expired(self) -> list[str]:
        cutoff = self._clock() - self._retention
        expired = [job_id for job_id, at in self._finished_at.items() if at <= cutoff]
        for job_id in expired:
            for store in (self._status, self._results, self._errors, self._finished_at):
                store.pop(job_id, None)
            if self._on_evict:
                self._on_evict(job_id)
        return expired
