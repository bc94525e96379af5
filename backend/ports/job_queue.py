"""JobQueuePort — abstract interface for job submission and tracking."""

from abc import ABC, abstractmethod
from typing import Any, Optional

JOB_PENDING = "pending"
JOB_RUNNING = "running"
JOB_COMPLETED = "completed"
JOB_FAILED = "failed"
JOB_CANCELLED = "cancelled"
JOB_UNKNOWN = "unknown"

DEFAULT_RETENTION_SECONDS = 3600.0


class JobQueuePort(ABC):
    @abstractmethod
    def submit(self, func: Any, *args, **kwargs) -> str:
        """Submit a callable for execution. Returns job ID.

        The callable is invoked as func(job_id, cancel_token, *args, **kwargs).
        """

    @abstractmethod
    def status(self, job_id: str) -> str:
        """Return job status: 'pending', 'running', 'completed', 'failed', 'cancelled'."""

    @abstractmethod
    def result(self, job_id: str) -> Optional[Any]:
        """Return job result if completed, None otherwise."""

    @abstractmethod
    def error(self, job_id: str) -> Optional[BaseException]:
        """Return the exception a failed job raised, None otherwise."""

    @abstractmethod
    def cancel(self, job_id: str) -> bool:
        """Request cancellation. Returns False if the job is unknown or finished."""

    @abstractmethod
    def evict_expired(self) -> list[str]:
        """Forget jobs that finished longer ago than the retention period.

        Returns the evicted job IDs; their status becomes 'unknown'.
        """
