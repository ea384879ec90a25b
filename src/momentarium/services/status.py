"""Read-only job status for polling clients."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from momentarium.domain.jobs import JobStatus
from momentarium.services.jobs import JobStore


class JobStatusView(BaseModel):
    """Client-facing poll response."""

    model_config = ConfigDict(populate_by_name=True)

    status: JobStatus
    job_id: UUID = Field(alias="jobId")
    created_at: datetime = Field(alias="createdAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")
    error: str | None = None
    result_url: str | None = Field(default=None, alias="resultUrl")


def gallery_path(user_id: int) -> str:
    """Path of the gallery endpoint for a user."""
    return f"/galleries/{user_id}"


@dataclass
class StatusResolver:
    """Translates persisted job state into poll responses."""

    job_store: JobStore

    def resolve(self, raw_job_id: str) -> JobStatusView | None:
        """Return the status view, or None for malformed or unknown ids."""
        try:
            job_id = UUID(raw_job_id)
        except ValueError:
            return None
        job = self.job_store.find_by_id(job_id)
        if job is None:
            return None
        return JobStatusView(
            status=job.status,
            job_id=job.id,
            created_at=job.created_at,
            completed_at=job.completed_at,
            error=job.error_message,
            result_url=(
                gallery_path(job.user_id)
                if job.status is JobStatus.COMPLETED
                else None
            ),
        )
