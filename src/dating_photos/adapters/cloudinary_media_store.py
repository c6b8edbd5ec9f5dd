"""Cloudinary media store adapter."""

import hashlib
import logging
import time
from dataclasses import dataclass

import httpx

from dating_photos.domain.errors import MediaStoreError
from dating_photos.domain.photos import (
    DeletionResult,
    ImageTransformation,
    UploadResult,
)
from dating_photos.services.photos import MediaStore

logger = logging.getLogger(__name__)

_UNSIGNED_PARAMS = {"file", "api_key", "signature", "resource_type", "cloud_name"}


@dataclass
class CloudinaryMediaStore(MediaStore):
    """Media store backed by Cloudinary's upload API."""

    cloud_name: str
    api_key: str
    api_secret: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, cloud_name: str, api_key: str, api_secret: str, base_url: str
    ) -> "CloudinaryMediaStore":
        """Create a media store with a managed httpx session."""
        return cls(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def upload(
        self,
        image_bytes: bytes,
        filename: str,
        transformation: ImageTransformation,
    ) -> UploadResult:
        """Upload an image with an incoming transformation."""
        params = self._signed({"transformation": transformation.to_param()})
        payload = await self._post(
            "upload",
            data=params,
            files={"file": (filename, image_bytes)},
            timeout=30,
        )
        url = payload.get("secure_url") or payload.get("url")
        public_id = payload.get("public_id")
        if not url or not public_id:
            raise MediaStoreError("Cloudinary upload returned no asset")
        return UploadResult(url=str(url), public_id=str(public_id))

    async def delete(self, public_id: str) -> DeletionResult:
        """Destroy an uploaded image by its public id."""
        params = self._signed({"public_id": public_id})
        payload = await self._post("destroy", data=params, timeout=10)
        return DeletionResult(result=str(payload.get("result", "")))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _post(
        self,
        action: str,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes]] | None = None,
        timeout: float = 10,
    ) -> dict[str, object]:
        url = f"{self.base_url}/{self.cloud_name}/image/{action}"
        try:
            response = await self.http_client.post(
                url, data=data, files=files, timeout=timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Cloudinary request failed", extra={"action": action})
            raise MediaStoreError(f"Cloudinary {action} failed") from exc
        return response.json()

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        """Add the timestamp, api key and signature Cloudinary requires."""
        signed = {**params, "timestamp": str(int(time.time()))}
        signed["signature"] = sign_params(signed, self.api_secret)
        signed["api_key"] = self.api_key
        return signed


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Return the SHA-1 request signature Cloudinary expects for ``params``.

    ``file``, ``api_key``, ``signature``, ``resource_type`` and ``cloud_name``
    are never signed, and neither are empty values. The remaining pairs are
    sorted by key and joined as ``key=value`` with ``&``. The API secret is
    appended to that string with no separator, and the hex SHA-1 digest of the
    result is the signature.
    """
    to_sign = "&".join(
        f"{key}={value}"
        for key, value in sorted(params.items())
        if key not in _UNSIGNED_PARAMS and value
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324
