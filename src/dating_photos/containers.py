"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from dating_photos.adapters.cloudinary_media_store import CloudinaryMediaStore
from dating_photos.adapters.supabase_photo_repository import SupabasePhotoRepository
from dating_photos.config import Settings
from dating_photos.services.authorization import PhotoAuthorizer
from dating_photos.services.photos import PhotoService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_service: PhotoService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    media_store = CloudinaryMediaStore.create(
        cloud_name=resolved_settings.cloudinary_cloud_name,
        api_key=resolved_settings.cloudinary_api_key,
        api_secret=resolved_settings.cloudinary_api_secret,
        base_url=resolved_settings.cloudinary_base_url,
    )
    photo_service = PhotoService(
        repository=photo_repository,
        media_store=media_store,
        authorizer=PhotoAuthorizer(),
    )

    async def close_resources() -> None:
        await media_store.close()

    return AppContainer(
        settings=resolved_settings,
        photo_service=photo_service,
        close_resources=close_resources,
    )
