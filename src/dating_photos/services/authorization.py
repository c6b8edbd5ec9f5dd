"""Identity and ownership checks shared by photo mutations."""

import logging
from dataclasses import dataclass
from uuid import UUID

from dating_photos.domain.errors import PhotoUnauthorizedError
from dating_photos.domain.photos import UserPhotos

logger = logging.getLogger(__name__)


@dataclass
class PhotoAuthorizer:
    """Rejects callers acting on users or photos that are not theirs.

    Ownership failures are reported as unauthorized rather than not found so
    the existence of other users' photos is never revealed.
    """

    def ensure_identity(self, user_id: UUID, authenticated_user_id: UUID) -> None:
        """Require the caller to be the user addressed by the request."""
        if user_id != authenticated_user_id:
            logger.warning(
                "Photo request rejected: identity mismatch",
                extra={"user_id": user_id, "caller_id": authenticated_user_id},
            )
            raise PhotoUnauthorizedError()

    def ensure_owner(self, user: UserPhotos | None, photo_id: UUID) -> UserPhotos:
        """Require the photo to be part of the user's collection."""
        if user is None or not user.owns(photo_id):
            logger.warning(
                "Photo request rejected: not the owner",
                extra={"user_id": user.id if user else None, "photo_id": photo_id},
            )
            raise PhotoUnauthorizedError()
        return user
