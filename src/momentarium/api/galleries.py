"""Gallery submission and retrieval endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from momentarium.api.models import ProcessGalleryRequest, validation_details
from momentarium.domain.albums import GalleryAlbum
from momentarium.services.jobs import JobValidationError

if TYPE_CHECKING:
    from momentarium.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/galleries", tags=["galleries"])


@router.post("/process")
async def process_gallery(request: Request) -> JSONResponse:
    """Accept a batch of uploaded images for background album generation."""
    container: AppContainer = request.app.state.container
    try:
        body = ProcessGalleryRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": validation_details(exc)},
        )
    try:
        job = await container.submission_service.submit(body.user_id, body.image_keys)
    except JobValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": str(exc)},
        )
    except Exception:
        logger.exception("Error processing gallery request")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to process gallery"},
        )
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED, content={"jobId": str(job.id)}
    )


@router.get("/{user_id}")
async def get_gallery(user_id: str, request: Request) -> JSONResponse:
    """Return a user's albums with signed image URLs."""
    container: AppContainer = request.app.state.container
    parsed_id = _parse_user_id(user_id)
    if parsed_id is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid gallery/user ID"},
        )
    try:
        albums = container.gallery_service.get_gallery(parsed_id)
    except Exception:
        logger.exception("Error fetching gallery", extra={"user_id": parsed_id})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch gallery"},
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"albums": [_album_payload(album) for album in albums]},
    )


def _parse_user_id(raw: str) -> int | None:
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value > 0 else None


def _album_payload(album: GalleryAlbum) -> dict[str, object]:
    return {
        "id": album.id,
        "user_id": album.user_id,
        "title": album.title,
        "theme_description": album.theme_description,
        "created_at": album.created_at.isoformat() if album.created_at else None,
        "images": [
            {
                "id": image.id,
                "storage_key": image.storage_key,
                "original_filename": image.original_filename,
                "content_type": image.content_type,
                "display_order": image.display_order,
                "url": image.url,
            }
            for image in album.images
        ],
    }
