"""Tests for container wiring."""

import asyncio

from dating_photos.adapters.cloudinary_media_store import CloudinaryMediaStore
from dating_photos.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.photo_service is not None
    media_store = container.photo_service.media_store
    assert isinstance(media_store, CloudinaryMediaStore)
    assert media_store.cloud_name == "demo"
    asyncio.run(container.close_resources())
