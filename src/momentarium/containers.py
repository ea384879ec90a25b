"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from momentarium.adapters.image_download_client import HttpxImageDownloader
from momentarium.adapters.openai_curation_client import OpenAICurationClient
from momentarium.adapters.qstash_client import HttpxQStashClient
from momentarium.adapters.supabase_album_repository import SupabaseAlbumRepository
from momentarium.adapters.supabase_image_repository import SupabaseImageRepository
from momentarium.adapters.supabase_job_repository import SupabaseJobRepository
from momentarium.adapters.supabase_storage_client import SupabaseStorageClient
from momentarium.config import Settings
from momentarium.services.albums import AlbumMaterializer
from momentarium.services.callback_auth import CallbackAuthenticator
from momentarium.services.curation import AlbumCurationService
from momentarium.services.gallery import GalleryService
from momentarium.services.images import ImageRegistry
from momentarium.services.jobs import JobStore
from momentarium.services.pipeline import PipelineWorker
from momentarium.services.queue import QueueDispatcher
from momentarium.services.status import StatusResolver
from momentarium.services.submission import JobSubmissionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    job_store: JobStore
    image_registry: ImageRegistry
    queue_dispatcher: QueueDispatcher
    submission_service: JobSubmissionService
    callback_authenticator: CallbackAuthenticator
    pipeline_worker: PipelineWorker
    status_resolver: StatusResolver
    gallery_service: GalleryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    job_store = JobStore(
        SupabaseJobRepository(supabase_client),
        max_batch_size=resolved_settings.max_batch_size,
    )
    image_registry = ImageRegistry(SupabaseImageRepository(supabase_client))
    album_repository = SupabaseAlbumRepository(supabase_client)
    storage_client = SupabaseStorageClient(
        supabase_client, bucket=resolved_settings.storage_bucket
    )
    qstash_client = HttpxQStashClient.create(
        token=resolved_settings.qstash_token,
        base_url=resolved_settings.qstash_url,
    )
    queue_dispatcher = QueueDispatcher(
        client=qstash_client,
        callback_url=resolved_settings.callback_url,
        api_secret=resolved_settings.api_secret_key,
        retries=resolved_settings.queue_retries,
    )
    image_downloader = HttpxImageDownloader.create()
    curation_service = AlbumCurationService(
        client=OpenAICurationClient.create(resolved_settings.openai_api_key),
        downloader=image_downloader,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    pipeline_worker = PipelineWorker(
        job_store=job_store,
        image_registry=image_registry,
        storage_client=storage_client,
        curation_service=curation_service,
        materializer=AlbumMaterializer(album_repository),
        read_url_expiry_seconds=resolved_settings.read_url_expiry_seconds,
    )

    async def close_resources() -> None:
        await qstash_client.close()
        await image_downloader.close()

    return AppContainer(
        settings=resolved_settings,
        job_store=job_store,
        image_registry=image_registry,
        queue_dispatcher=queue_dispatcher,
        submission_service=JobSubmissionService(
            image_registry=image_registry,
            job_store=job_store,
            dispatcher=queue_dispatcher,
        ),
        callback_authenticator=CallbackAuthenticator(
            api_secret=resolved_settings.api_secret_key,
            signing_keys=resolved_settings.signing_keys(),
            require_signature=resolved_settings.verify_queue_signature,
        ),
        pipeline_worker=pipeline_worker,
        status_resolver=StatusResolver(job_store),
        gallery_service=GalleryService(
            album_repository=album_repository,
            storage_client=storage_client,
            read_url_expiry_seconds=resolved_settings.read_url_expiry_seconds,
        ),
        close_resources=close_resources,
    )
