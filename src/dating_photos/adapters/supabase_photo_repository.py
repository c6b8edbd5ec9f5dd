"""Supabase-backed photo repository."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from dating_photos.domain.errors import RepositoryError
from dating_photos.domain.photos import NewPhoto, PhotoRecord, UserPhotos
from dating_photos.services.photos import PhotoRepository

logger = logging.getLogger(__name__)

_PHOTO_COLUMNS = "id, user_id, url, public_id, is_main, description, date_added"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for profile photo persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserPhotos | None:
        """Return the user and their photos, if the user exists."""
        response = (
            self.client.table("users")
            .select("id")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        photos = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("user_id", str(user_id))
            .execute()
        )
        return UserPhotos(
            id=UUID(response.data[0]["id"]),
            photos=[_row_to_photo(row) for row in photos.data or []],
        )

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_photo(response.data[0])
        return None

    def get_main_photo_for_user(self, user_id: UUID) -> PhotoRecord | None:
        """Return the user's main photo, if any."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_main", True)
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_photo(response.data[0])
        return None

    def add_photo(self, user_id: UUID, photo: NewPhoto) -> PhotoRecord:
        """Insert a photo row and return it."""
        response = _execute(
            self.client.table("photos").insert(
                {
                    "user_id": str(user_id),
                    "url": photo.url,
                    "public_id": photo.public_id,
                    "is_main": photo.is_main,
                    "description": photo.description,
                    "date_added": photo.date_added.isoformat(),
                }
            ),
            "Failed to create photo",
        )
        return _row_to_photo(response.data[0])

    def set_main_photo(self, user_id: UUID, photo_id: UUID) -> None:
        """Swap the main photo inside the set_main_photo database function."""
        _execute(
            self.client.rpc(
                "set_main_photo",
                {"p_user_id": str(user_id), "p_photo_id": str(photo_id)},
            ),
            "Failed to set main photo",
        )

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""
        _execute(
            self.client.table("photos").delete().eq("id", str(photo_id)),
            "Failed to delete photo",
        )


def _execute(query: Any, error_message: str) -> Any:
    """Run a write and raise RepositoryError unless it returned data."""
    try:
        response = query.execute()
    except APIError as exc:
        logger.exception(error_message, extra={"code": exc.code})
        raise RepositoryError(error_message) from exc
    if not response.data:
        raise RepositoryError(error_message)
    return response


def _row_to_photo(row: dict[str, object]) -> PhotoRecord:
    return PhotoRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        url=str(row["url"]),
        public_id=row.get("public_id"),
        is_main=bool(row.get("is_main")),
        description=row.get("description"),
        date_added=datetime.fromisoformat(str(row["date_added"])),
    )
