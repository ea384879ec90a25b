"""Dispatch of processing jobs to the push queue."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

logger = logging.getLogger(__name__)

API_SECRET_HEADER = "X-API-Secret"


class DispatchError(RuntimeError):
    """Raised when a job could not be handed to the queue."""


class QueueClient(Protocol):
    """Interface for a push queue that delivers messages to a callback URL."""

    async def publish_json(
        self,
        *,
        url: str,
        body: dict[str, object],
        headers: dict[str, str],
        retries: int,
    ) -> str:
        """Publish a JSON message and return the provider message id."""


@dataclass
class QueueDispatcher:
    """Publishes jobs so the queue calls the processing webhook."""

    client: QueueClient
    callback_url: str
    api_secret: str
    retries: int = 3

    async def enqueue(self, job_id: UUID, user_id: int, image_keys: list[str]) -> str:
        """Publish a job message and return its message id.

        Delivery is at-least-once; duplicates are not filtered here.
        """
        body: dict[str, object] = {
            "jobId": str(job_id),
            "userId": user_id,
            "imageKeys": list(image_keys),
        }
        try:
            message_id = await self.client.publish_json(
                url=self.callback_url,
                body=body,
                headers={API_SECRET_HEADER: self.api_secret},
                retries=self.retries,
            )
        except Exception as exc:
            logger.exception("Failed to enqueue job", extra={"job_id": str(job_id)})
            raise DispatchError("Failed to enqueue processing job") from exc
        logger.info(
            "Job enqueued with message %s", message_id, extra={"job_id": str(job_id)}
        )
        return message_id
