"""Domain models for album processing jobs."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class JobStatus(StrEnum):
    """Lifecycle states of a processing job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {JobStatus.COMPLETED, JobStatus.FAILED}


@dataclass(frozen=True)
class ProcessingJob:
    """Represents a persisted processing job row."""

    id: UUID
    user_id: int
    status: JobStatus
    image_keys: tuple[str, ...]
    created_at: datetime
    result_data: dict[str, object] | None = None
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
