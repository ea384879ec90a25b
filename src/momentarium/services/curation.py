"""Album curation with a multimodal model and a deterministic fallback."""

import asyncio
import base64
import json
import logging
import math
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from momentarium.domain.curation import AlbumProposal, CurationOutcome, GeneratedAlbum
from momentarium.domain.images import ImageSource

logger = logging.getLogger(__name__)

MAX_ALBUMS = 10
FALLBACK_TITLE = "My Photo Collection"
FALLBACK_THEME = "A collection of memorable moments and beautiful scenes."

PROPOSAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "albums": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "theme": {"type": "string"},
                    "image_keys": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["title", "theme", "image_keys"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["albums"],
    "additionalProperties": False,
}


class ProposalValidationError(ValueError):
    """Raised when a model reply is not a usable album proposal."""


class CurationClient(Protocol):
    """Interface for a multimodal model that answers with text."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_urls: list[str],
        schema: dict[str, object],
    ) -> str:
        """Send the prompt and every image in one request and return the reply."""


class ImageDownloader(Protocol):
    """Interface for fetching image bytes from a read URL."""

    async def download(self, url: str) -> bytes:
        """Return the object body."""


@dataclass
class AlbumCurationService:
    """Groups a batch of images into albums with a single model call."""

    client: CurationClient
    downloader: ImageDownloader
    model: str
    reasoning_effort: str | None
    store: bool

    async def curate(
        self, sources: list[ImageSource], image_keys: list[str] | tuple[str, ...]
    ) -> CurationOutcome:
        """Return the model's proposal, or the fallback album if it fails.

        The fallback holds every key of ``image_keys`` in submission order.
        """
        try:
            proposal = await self.propose(sources)
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
            logger.warning("Album curation failed, using fallback album: %s", reason)
            return CurationOutcome(
                proposal=fallback_proposal(image_keys), fallback_reason=reason
            )
        return CurationOutcome(proposal=proposal)

    async def propose(self, sources: list[ImageSource]) -> AlbumProposal:
        """Ask the model for an album proposal covering ``sources``."""
        if not sources:
            raise ProposalValidationError("No images to curate")
        payloads = await asyncio.gather(
            *(self.downloader.download(source.url) for source in sources)
        )
        reply = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=build_curation_prompt([source.storage_key for source in sources]),
            image_data_urls=[_to_data_url(payload) for payload in payloads],
            schema=PROPOSAL_SCHEMA,
        )
        return parse_proposal(reply)


def max_album_count(image_count: int) -> int:
    """Upper bound on albums for a batch of ``image_count`` images."""
    return max(1, min(math.ceil(image_count / 3), MAX_ALBUMS))


def build_curation_prompt(image_keys: list[str]) -> str:
    """Build the grouping instruction for a batch of storage keys."""
    listing = "\n".join(f'  - Image "{key}"' for key in image_keys)
    upper = max_album_count(len(image_keys))
    minimum_rule = (
        "The batch holds a single image, so create exactly one album for it."
        if len(image_keys) == 1
        else "Each album must contain at least 2 images."
    )
    return (
        "You are an expert photo gallery curator. The images attached to this "
        "message are listed below in the same order. Study the content, mood, "
        "color palette and subjects across all of them and group them into "
        "thematic albums. For each album give a creative title, a short artistic "
        "theme description and the keys of the images that belong to it.\n\n"
        "RULES:\n"
        "1. Every image belongs to exactly one album.\n"
        f"2. Create between 1 and {upper} albums depending on how diverse the "
        "images are.\n"
        f"3. {minimum_rule}\n"
        "4. Reply with a single valid JSON object and nothing else: no prose, "
        "no markdown, no code fences.\n"
        "5. The JSON object must match this schema:\n"
        '{"albums": [{"title": "A Creative Album Title", '
        '"theme": "A short description of the album\'s mood and story.", '
        '"image_keys": ["key_of_image_1.jpg", "key_of_image_5.jpg"]}]}\n\n'
        f"Images:\n{listing}\n"
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    first_newline = cleaned.find("\n")
    if first_newline == -1:
        cleaned = cleaned.removeprefix("```json").removeprefix("```")
    else:
        cleaned = cleaned[first_newline + 1 :]
    cleaned = cleaned.rstrip()
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_proposal(text: str) -> AlbumProposal:
    """Parse and validate a model reply."""
    try:
        raw = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as exc:
        raise ProposalValidationError(f"Reply is not valid JSON: {exc}") from exc
    try:
        return AlbumProposal.model_validate(raw)
    except ValidationError as exc:
        raise ProposalValidationError(
            f"Reply does not match the album schema: {exc.error_count()} error(s)"
        ) from exc


def fallback_proposal(image_keys: list[str] | tuple[str, ...]) -> AlbumProposal:
    """Single album holding every key of the batch."""
    return AlbumProposal(
        albums=[
            GeneratedAlbum(
                title=FALLBACK_TITLE,
                theme=FALLBACK_THEME,
                image_keys=list(image_keys),
            )
        ]
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
