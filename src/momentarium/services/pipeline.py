"""Background execution of album processing jobs."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from momentarium.domain.albums import MaterializedAlbum
from momentarium.domain.images import ImageSource
from momentarium.domain.jobs import JobStatus, ProcessingJob
from momentarium.services.albums import AlbumMaterializer
from momentarium.services.curation import AlbumCurationService
from momentarium.services.images import ImageRegistry
from momentarium.services.jobs import JobStore
from momentarium.services.storage import StorageClient

logger = logging.getLogger(__name__)


class ImagesNotFoundError(RuntimeError):
    """Raised when none of a job's storage keys is registered."""


class JobStateError(RuntimeError):
    """Raised when a claimed job was moved on by another writer."""


class PipelineOutcome(StrEnum):
    """How a job delivery ended."""

    COMPLETED = "completed"
    FAILED = "failed"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PipelineResult:
    """Summary of a single job delivery."""

    job_id: UUID
    outcome: PipelineOutcome
    albums_created: int = 0
    used_fallback: bool = False
    error: str | None = None
    status: JobStatus | None = None


@dataclass
class PipelineWorker:
    """Runs a job to completion: images, curation, albums, final status.

    A job runs only for the delivery that claims it, so repeated deliveries
    of the same job never create a second set of albums.
    """

    job_store: JobStore
    image_registry: ImageRegistry
    storage_client: StorageClient
    curation_service: AlbumCurationService
    materializer: AlbumMaterializer
    read_url_expiry_seconds: int = 3600

    async def run(self, job_id: UUID) -> PipelineResult:
        """Execute the job identified by ``job_id``."""
        log_extra = {"job_id": str(job_id)}
        job = self.job_store.find_by_id(job_id)
        if job is None:
            logger.warning("Job not found", extra=log_extra)
            return PipelineResult(job_id=job_id, outcome=PipelineOutcome.NOT_FOUND)

        claimed = self.job_store.start(job_id)
        if claimed is None:
            current = self.job_store.find_by_id(job_id)
            status = current.status if current else job.status
            if status.is_terminal:
                logger.info(
                    "Job already %s, skipping redelivery", status, extra=log_extra
                )
            else:
                logger.warning(
                    "Skipping delivery, job is still %s", status, extra=log_extra
                )
            return PipelineResult(
                job_id=job_id, outcome=PipelineOutcome.DUPLICATE, status=status
            )

        logger.info(
            "Processing job with %d images", len(claimed.image_keys), extra=log_extra
        )
        try:
            return await self._execute(claimed)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.exception("Job failed", extra=log_extra)
            self.job_store.fail(job_id, message)
            return PipelineResult(
                job_id=job_id,
                outcome=PipelineOutcome.FAILED,
                error=message,
                status=JobStatus.FAILED,
            )

    async def _execute(self, job: ProcessingJob) -> PipelineResult:
        images = self.image_registry.resolve(job.image_keys)
        if not images:
            raise ImagesNotFoundError("No images found for the provided keys")

        sources = [
            ImageSource(
                storage_key=image.storage_key,
                url=self.storage_client.create_read_url(
                    image.storage_key, self.read_url_expiry_seconds
                ),
            )
            for image in images
        ]
        outcome = await self.curation_service.curate(sources, job.image_keys)
        albums = self.materializer.materialize(job.user_id, outcome.proposal, images)
        self._complete(job, outcome.proposal.model_dump(mode="json"), albums)

        logger.info(
            "Job completed with %d album(s)%s",
            len(albums),
            " (fallback)" if outcome.used_fallback else "",
            extra={"job_id": str(job.id)},
        )
        return PipelineResult(
            job_id=job.id,
            outcome=PipelineOutcome.COMPLETED,
            albums_created=len(albums),
            used_fallback=outcome.used_fallback,
            status=JobStatus.COMPLETED,
        )

    def _complete(
        self,
        job: ProcessingJob,
        result_data: dict[str, object],
        albums: list[MaterializedAlbum],
    ) -> None:
        try:
            completed = self.job_store.complete(job.id, result_data)
            if completed is None:
                raise JobStateError("Job left the processing state before completion")
        except Exception:
            self.materializer.discard(albums)
            raise
