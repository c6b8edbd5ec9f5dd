"""Profile photo lifecycle and main-photo rules."""

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from dating_photos.domain.errors import (
    MediaStoreError,
    PhotoNotFoundError,
    PhotoPersistenceError,
    PhotoValidationError,
    RepositoryError,
)
from dating_photos.domain.photos import (
    PROFILE_TRANSFORMATION,
    DeletionResult,
    ImageTransformation,
    NewPhoto,
    PhotoRecord,
    UploadResult,
    UserPhotos,
)
from dating_photos.services.authorization import PhotoAuthorizer

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for users' photo collections."""

    def get_user(self, user_id: UUID) -> UserPhotos | None:
        """Return the user with their photos, if present."""

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def get_main_photo_for_user(self, user_id: UUID) -> PhotoRecord | None:
        """Return the user's main photo, if any."""

    def add_photo(self, user_id: UUID, photo: NewPhoto) -> PhotoRecord:
        """Persist a new photo for the user and return it."""

    def set_main_photo(self, user_id: UUID, photo_id: UUID) -> None:
        """Atomically clear the current main photo and mark photo_id as main."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo record."""


class MediaStore(Protocol):
    """Interface for the remote image host."""

    async def upload(
        self,
        image_bytes: bytes,
        filename: str,
        transformation: ImageTransformation,
    ) -> UploadResult:
        """Upload an image and return where it is hosted."""

    async def delete(self, public_id: str) -> DeletionResult:
        """Remove a hosted image."""


@dataclass
class PhotoService:
    """Application service for a user's profile photos.

    Mutations for a single user are serialized so concurrent requests cannot
    leave the collection with zero or two main photos.
    """

    repository: PhotoRepository
    media_store: MediaStore
    authorizer: PhotoAuthorizer = field(default_factory=PhotoAuthorizer)
    _locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = field(
        default_factory=weakref.WeakValueDictionary, init=False, repr=False
    )

    async def get_photo(self, photo_id: UUID) -> PhotoRecord:
        """Return a photo or raise when it does not exist."""
        return self._require_photo(photo_id)

    async def add_photo(  # noqa: PLR0913
        self,
        user_id: UUID,
        authenticated_user_id: UUID,
        image_bytes: bytes,
        filename: str,
        description: str | None = None,
    ) -> PhotoRecord:
        """Upload an image and attach it to the user's collection.

        The user's first photo becomes the main photo.
        """
        self.authorizer.ensure_identity(user_id, authenticated_user_id)
        if not image_bytes:
            raise PhotoValidationError("Uploaded file is empty")

        async with self._lock_for(user_id):
            user = self.repository.get_user(user_id)
            if user is None:
                raise PhotoNotFoundError("User not found")

            upload = await self.media_store.upload(
                image_bytes, filename, PROFILE_TRANSFORMATION
            )
            new_photo = NewPhoto(
                url=upload.url,
                public_id=upload.public_id,
                is_main=not user.has_main_photo,
                description=description,
                date_added=datetime.now(tz=UTC),
            )
            try:
                photo = self.repository.add_photo(user_id, new_photo)
            except RepositoryError as exc:
                logger.exception(
                    "Failed to save uploaded photo",
                    extra={"user_id": user_id, "public_id": upload.public_id},
                )
                await self._discard_upload(upload.public_id)
                raise PhotoPersistenceError("Could not add the photo") from exc

        logger.info(
            "Photo added",
            extra={"user_id": user_id, "photo_id": photo.id, "is_main": photo.is_main},
        )
        return photo

    async def set_main_photo(
        self, user_id: UUID, authenticated_user_id: UUID, photo_id: UUID
    ) -> None:
        """Make photo_id the user's only main photo."""
        self.authorizer.ensure_identity(user_id, authenticated_user_id)

        async with self._lock_for(user_id):
            self.authorizer.ensure_owner(self.repository.get_user(user_id), photo_id)
            photo = self._require_photo(photo_id)
            if photo.is_main:
                raise PhotoValidationError("This is already the main photo")

            current_main = self.repository.get_main_photo_for_user(user_id)
            try:
                self.repository.set_main_photo(user_id, photo_id)
            except RepositoryError as exc:
                logger.exception(
                    "Failed to set main photo",
                    extra={"user_id": user_id, "photo_id": photo_id},
                )
                raise PhotoPersistenceError("Could not set photo to main") from exc

        logger.info(
            "Main photo changed",
            extra={
                "user_id": user_id,
                "photo_id": photo_id,
                "previous_main_id": current_main.id if current_main else None,
            },
        )

    async def delete_photo(
        self, user_id: UUID, authenticated_user_id: UUID, photo_id: UUID
    ) -> None:
        """Delete a non-main photo, removing hosted media first when present."""
        self.authorizer.ensure_identity(user_id, authenticated_user_id)

        async with self._lock_for(user_id):
            self.authorizer.ensure_owner(self.repository.get_user(user_id), photo_id)
            photo = self._require_photo(photo_id)
            if photo.is_main:
                raise PhotoValidationError("You cannot delete your main photo")

            if photo.public_id is not None:
                result = await self.media_store.delete(photo.public_id)
                if not result.ok:
                    logger.warning(
                        "Media store refused to delete photo",
                        extra={
                            "photo_id": photo_id,
                            "public_id": photo.public_id,
                            "result": result.result,
                        },
                    )
                    raise PhotoPersistenceError("Failed to delete photo")

            try:
                self.repository.delete_photo(photo_id)
            except RepositoryError as exc:
                logger.exception(
                    "Failed to delete photo record", extra={"photo_id": photo_id}
                )
                raise PhotoPersistenceError("Failed to delete photo") from exc

        logger.info("Photo deleted", extra={"user_id": user_id, "photo_id": photo_id})

    def _require_photo(self, photo_id: UUID) -> PhotoRecord:
        photo = self.repository.get_photo(photo_id)
        if photo is None:
            raise PhotoNotFoundError("Photo not found")
        return photo

    def _lock_for(self, user_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def _discard_upload(self, public_id: str) -> None:
        """Remove media whose photo record could not be saved."""
        try:
            result = await self.media_store.delete(public_id)
        except MediaStoreError:
            logger.exception(
                "Failed to remove orphaned upload", extra={"public_id": public_id}
            )
            return
        if not result.ok:
            logger.warning(
                "Orphaned upload was not removed",
                extra={"public_id": public_id, "result": result.result},
            )
