"""Response models for the photo API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from dating_photos.domain.photos import PhotoRecord


class PhotoView(BaseModel):
    """Photo as returned to API clients."""

    id: UUID
    url: str
    description: str | None = None
    date_added: datetime
    is_main: bool
    public_id: str | None = None

    @classmethod
    def from_record(cls, photo: PhotoRecord) -> "PhotoView":
        return cls(
            id=photo.id,
            url=photo.url,
            description=photo.description,
            date_added=photo.date_added,
            is_main=photo.is_main,
            public_id=photo.public_id,
        )
