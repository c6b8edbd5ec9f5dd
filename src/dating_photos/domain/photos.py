"""Domain models for profile photos."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a photo stored in the database."""

    id: UUID
    user_id: UUID
    url: str
    public_id: str | None
    is_main: bool
    description: str | None
    date_added: datetime


@dataclass(frozen=True)
class NewPhoto:
    """Attributes of a photo that has not been persisted yet."""

    url: str
    public_id: str | None
    is_main: bool
    description: str | None
    date_added: datetime


@dataclass(frozen=True)
class UserPhotos:
    """A user together with their photo collection."""

    id: UUID
    photos: list[PhotoRecord] = field(default_factory=list)

    def owns(self, photo_id: UUID) -> bool:
        """Return True when the photo belongs to this user."""
        return any(photo.id == photo_id for photo in self.photos)

    @property
    def main_photo(self) -> PhotoRecord | None:
        return next((photo for photo in self.photos if photo.is_main), None)

    @property
    def has_main_photo(self) -> bool:
        return self.main_photo is not None


@dataclass(frozen=True)
class ImageTransformation:
    """Resize and crop parameters applied by the media store on upload."""

    width: int
    height: int
    crop: str
    gravity: str

    def to_param(self) -> str:
        """Render as a Cloudinary transformation string."""
        return f"c_{self.crop},g_{self.gravity},h_{self.height},w_{self.width}"


# Profile photos are cropped around the face into a square thumbnail.
PROFILE_TRANSFORMATION = ImageTransformation(
    width=500, height=500, crop="thumb", gravity="face"
)


@dataclass(frozen=True)
class UploadResult:
    """Location of an uploaded image in the media store."""

    url: str
    public_id: str


@dataclass(frozen=True)
class DeletionResult:
    """Outcome reported by the media store for a destroy request."""

    result: str

    @property
    def ok(self) -> bool:
        return self.result == "ok"
