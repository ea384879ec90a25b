"""Supabase-backed processing job repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from momentarium.domain.jobs import JobStatus, ProcessingJob
from momentarium.services.jobs import JobRepository

_COLUMNS = (
    "id, user_id, status, image_keys, result_data, error_message, "
    "created_at, started_at, completed_at"
)


@dataclass
class SupabaseJobRepository(JobRepository):
    """Supabase implementation for processing jobs."""

    client: Client

    def create_job(self, user_id: int, image_keys: list[str]) -> ProcessingJob:
        """Create a pending job row and return it."""
        response = (
            self.client.table("processing_jobs")
            .insert({"user_id": user_id, "image_keys": image_keys})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create processing job")
        return _to_job(response.data[0])

    def get_job(self, job_id: UUID) -> ProcessingJob | None:
        """Return a job by id, if present."""
        response = (
            self.client.table("processing_jobs")
            .select(_COLUMNS)
            .eq("id", str(job_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_job(response.data[0])

    def update_job(
        self,
        job_id: UUID,
        expected_status: JobStatus,
        changes: dict[str, object],
    ) -> ProcessingJob | None:
        """Update the job only while it still has the expected status."""
        response = (
            self.client.table("processing_jobs")
            .update(changes)
            .eq("id", str(job_id))
            .eq("status", expected_status.value)
            .execute()
        )
        if not response.data:
            return None
        return _to_job(response.data[0])


def _to_job(row: dict[str, object]) -> ProcessingJob:
    return ProcessingJob(
        id=UUID(str(row["id"])),
        user_id=int(row["user_id"]),
        status=JobStatus(row["status"]),
        image_keys=tuple(row.get("image_keys") or ()),
        result_data=row.get("result_data"),
        error_message=row.get("error_message"),
        created_at=_parse_timestamp(row.get("created_at")),
        started_at=_parse_timestamp(row.get("started_at")),
        completed_at=_parse_timestamp(row.get("completed_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
