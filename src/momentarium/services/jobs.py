"""Processing job lifecycle and status transitions."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from momentarium.domain.jobs import JobStatus, ProcessingJob

_PREDECESSORS: dict[JobStatus, JobStatus] = {
    JobStatus.PROCESSING: JobStatus.PENDING,
    JobStatus.COMPLETED: JobStatus.PROCESSING,
    JobStatus.FAILED: JobStatus.PROCESSING,
}


class JobValidationError(ValueError):
    """Raised when a job cannot be created from the submitted keys."""


class JobTransitionError(RuntimeError):
    """Raised for a status change the job state machine never allows."""


class JobRepository(Protocol):
    """Persistence interface for processing jobs."""

    def create_job(self, user_id: int, image_keys: list[str]) -> ProcessingJob:
        """Create a pending job and return it."""

    def get_job(self, job_id: UUID) -> ProcessingJob | None:
        """Return a job by id, if present."""

    def update_job(
        self,
        job_id: UUID,
        expected_status: JobStatus,
        changes: dict[str, object],
    ) -> ProcessingJob | None:
        """Apply changes if the job is still in the expected status.

        Returns the updated job, or None when no row matched.
        """


@dataclass
class JobStore:
    """Creates jobs and drives their status transitions."""

    repository: JobRepository
    max_batch_size: int = 50

    def validate_batch(self, image_keys: list[str]) -> None:
        """Raise JobValidationError unless the batch size is acceptable."""
        if not image_keys:
            raise JobValidationError("At least one image key is required")
        if len(image_keys) > self.max_batch_size:
            raise JobValidationError(
                f"A batch holds at most {self.max_batch_size} images, "
                f"got {len(image_keys)}"
            )

    def create(self, user_id: int, image_keys: list[str]) -> ProcessingJob:
        """Create a pending job for a batch of storage keys."""
        self.validate_batch(image_keys)
        return self.repository.create_job(user_id, list(image_keys))

    def find_by_id(self, job_id: UUID) -> ProcessingJob | None:
        """Return the job, if present."""
        return self.repository.get_job(job_id)

    def update_status(
        self,
        job_id: UUID,
        status: JobStatus,
        result_data: dict[str, object] | None = None,
        error_message: str | None = None,
    ) -> ProcessingJob | None:
        """Move a job to ``status`` if it is still in the preceding status.

        Returns None when another writer already moved the job on.
        """
        expected = _PREDECESSORS.get(status)
        if expected is None:
            raise JobTransitionError(f"Jobs cannot move back to {status}")
        now = datetime.now(tz=UTC).isoformat()
        changes: dict[str, object] = {"status": status.value}
        if status is JobStatus.PROCESSING:
            changes["started_at"] = now
        elif status is JobStatus.COMPLETED:
            changes["completed_at"] = now
            changes["result_data"] = result_data
        else:
            changes["completed_at"] = now
            changes["error_message"] = error_message
        return self.repository.update_job(job_id, expected, changes)

    def start(self, job_id: UUID) -> ProcessingJob | None:
        """Claim a pending job for processing."""
        return self.update_status(job_id, JobStatus.PROCESSING)

    def complete(
        self, job_id: UUID, result_data: dict[str, object]
    ) -> ProcessingJob | None:
        """Mark a processing job completed with its result payload."""
        return self.update_status(job_id, JobStatus.COMPLETED, result_data=result_data)

    def fail(self, job_id: UUID, error_message: str) -> ProcessingJob | None:
        """Mark a processing job failed."""
        return self.update_status(job_id, JobStatus.FAILED, error_message=error_message)
