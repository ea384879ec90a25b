"""Models for AI album proposals."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator


class GeneratedAlbum(BaseModel):
    """Single album entry of a proposal."""

    title: str
    theme: str
    image_keys: list[str] = Field(min_length=1)

    @field_validator("title", "theme")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class AlbumProposal(BaseModel):
    """Structured album grouping for a batch of images."""

    albums: list[GeneratedAlbum] = Field(min_length=1)


@dataclass(frozen=True)
class CurationOutcome:
    """Result of album curation.

    ``fallback_reason`` is set when the model could not produce a valid
    proposal and ``proposal`` holds the fallback album instead.
    """

    proposal: AlbumProposal
    fallback_reason: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None
