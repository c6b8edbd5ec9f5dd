"""ASGI entrypoint serving the photo API, e.g. `uvicorn dating_photos.api.asgi:app`."""

from dating_photos.api.app import create_app
from dating_photos.config import Settings
from dating_photos.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
