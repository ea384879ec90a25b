"""Job submission: register images, create the job, enqueue it."""

from dataclasses import dataclass

from momentarium.domain.jobs import ProcessingJob
from momentarium.services.images import ImageRegistry
from momentarium.services.jobs import JobStore
from momentarium.services.queue import QueueDispatcher


@dataclass
class JobSubmissionService:
    """Accepts a batch of uploaded keys for background album generation."""

    image_registry: ImageRegistry
    job_store: JobStore
    dispatcher: QueueDispatcher

    async def submit(self, user_id: int, image_keys: list[str]) -> ProcessingJob:
        """Create and enqueue a job.

        If publishing fails the error propagates and the job stays pending.
        """
        self.job_store.validate_batch(image_keys)
        for key in dict.fromkeys(image_keys):
            self.image_registry.ensure(user_id, key)
        job = self.job_store.create(user_id, image_keys)
        await self.dispatcher.enqueue(job.id, user_id, list(job.image_keys))
        return job
