"""Pydantic models for inbound request payloads."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class JobQueuePayload(BaseModel):
    """Body the queue delivers to the processing webhook."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: UUID = Field(alias="jobId")
    user_id: int = Field(alias="userId", gt=0, strict=True)
    image_keys: list[str] = Field(alias="imageKeys", min_length=1)


class ProcessGalleryRequest(BaseModel):
    """Body of a job submission."""

    model_config = ConfigDict(populate_by_name=True)

    image_keys: list[str] = Field(alias="imageKeys", min_length=1)
    user_id: int = Field(alias="userId", gt=0, strict=True)


def validation_details(exc: ValidationError) -> list[dict[str, object]]:
    """Return JSON-safe validation error details."""
    return [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors(include_url=False)
    ]
