"""Job processing webhook and status endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from momentarium.api.models import JobQueuePayload, validation_details
from momentarium.services.callback_auth import CallbackAuthError
from momentarium.services.pipeline import PipelineOutcome

if TYPE_CHECKING:
    from momentarium.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


async def require_callback_auth(
    request: Request,
    x_api_secret: str | None = Header(default=None),
    upstash_signature: str | None = Header(default=None),
) -> None:
    """Ensure callback deliveries carry the shared secret (and signature)."""
    container: AppContainer = request.app.state.container
    body = await request.body()
    try:
        container.callback_authenticator.authenticate(
            x_api_secret, upstash_signature, body
        )
    except CallbackAuthError as exc:
        logger.warning("Unauthorized job processing request: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        ) from exc


@router.get("/process")
async def process_job_probe() -> dict[str, str]:
    """Liveness probe for the processing webhook."""
    return {"message": "Job processing webhook endpoint is active"}


@router.post("/process", dependencies=[Depends(require_callback_auth)])
async def process_job(request: Request) -> JSONResponse:
    """Run a queued job delivered by the queue provider."""
    container: AppContainer = request.app.state.container
    try:
        payload = JobQueuePayload.model_validate_json(await request.body())
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": validation_details(exc)},
        )

    job_id = str(payload.job_id)
    try:
        result = await container.pipeline_worker.run(payload.job_id)
    except Exception:
        logger.exception("Error in job processing endpoint", extra={"job_id": job_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    if result.outcome is PipelineOutcome.NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Job not found", "jobId": job_id},
        )
    if result.outcome is PipelineOutcome.FAILED:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Processing failed", "details": result.error},
        )
    content: dict[str, object] = {
        "success": True,
        "jobId": job_id,
        "albumsCreated": result.albums_created,
    }
    if result.outcome is PipelineOutcome.DUPLICATE:
        content["duplicate"] = True
        content["status"] = result.status.value if result.status else None
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.get("/{job_id}/status")
async def job_status(job_id: str, request: Request) -> JSONResponse:
    """Return the current status of a job for polling clients."""
    container: AppContainer = request.app.state.container
    view = container.status_resolver.resolve(job_id)
    if view is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": "Job not found"}
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=view.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
