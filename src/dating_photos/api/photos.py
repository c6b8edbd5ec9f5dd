"""Profile photo endpoints."""

from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Request,
    Response,
    UploadFile,
    status,
)

from dating_photos.api.auth import get_current_user_id
from dating_photos.api.models import PhotoView
from dating_photos.services.photos import PhotoService

router = APIRouter(prefix="/api/users/{user_id}/photos", tags=["photos"])


def _get_photo_service(request: Request) -> PhotoService:
    return request.app.state.container.photo_service


@router.get(
    "/{photo_id}", name="get_photo", dependencies=[Depends(get_current_user_id)]
)
async def get_photo(
    user_id: UUID,
    photo_id: UUID,
    service: PhotoService = Depends(_get_photo_service),
) -> PhotoView:
    """Return a single photo."""
    photo = await service.get_photo(photo_id)
    return PhotoView.from_record(photo)


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_photo(  # noqa: PLR0913
    user_id: UUID,
    request: Request,
    response: Response,
    file: UploadFile = File(...),
    description: str | None = Form(default=None),
    caller_id: UUID = Depends(get_current_user_id),
    service: PhotoService = Depends(_get_photo_service),
) -> PhotoView:
    """Upload a photo for the user."""
    image_bytes = await file.read()
    photo = await service.add_photo(
        user_id=user_id,
        authenticated_user_id=caller_id,
        image_bytes=image_bytes,
        filename=file.filename or "upload",
        description=description,
    )
    response.headers["Location"] = str(
        request.url_for("get_photo", user_id=str(user_id), photo_id=str(photo.id))
    )
    return PhotoView.from_record(photo)


@router.post("/{photo_id}/setMain", status_code=status.HTTP_204_NO_CONTENT)
async def set_main_photo(
    user_id: UUID,
    photo_id: UUID,
    caller_id: UUID = Depends(get_current_user_id),
    service: PhotoService = Depends(_get_photo_service),
) -> Response:
    """Mark a photo as the user's main photo."""
    await service.set_main_photo(user_id, caller_id, photo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{photo_id}")
async def delete_photo(
    user_id: UUID,
    photo_id: UUID,
    caller_id: UUID = Depends(get_current_user_id),
    service: PhotoService = Depends(_get_photo_service),
) -> dict[str, str]:
    """Delete one of the user's photos."""
    await service.delete_photo(user_id, caller_id, photo_id)
    return {"status": "ok"}
