"""Cloudinary photo hosting client."""

import hashlib
import logging
import time
from dataclasses import dataclass

import httpx

from members_api.domain.photos import (
    PhotoDeletionResult,
    PhotoUpload,
    PhotoUploadResult,
)
from members_api.services.members import PhotoService

logger = logging.getLogger(__name__)

_UPLOAD_TRANSFORMATION = "c_fill,g_face,h_500,w_500"


@dataclass
class HttpxCloudinaryPhotoService(PhotoService):
    """Photo service using the Cloudinary upload API over httpx."""

    cloud_name: str
    api_key: str
    api_secret: str
    base_url: str
    folder: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.cloudinary.com/v1_1",
        folder: str = "members",
    ) -> "HttpxCloudinaryPhotoService":
        """Create a photo service with a managed httpx session."""
        return cls(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            base_url=base_url,
            folder=folder,
            http_client=httpx.AsyncClient(),
        )

    async def upload(self, file: PhotoUpload) -> PhotoUploadResult:
        """Upload an image cropped to a square around the face."""
        params = self._signed(
            {"folder": self.folder, "transformation": _UPLOAD_TRANSFORMATION}
        )
        try:
            response = await self.http_client.post(
                f"{self.base_url}/{self.cloud_name}/image/upload",
                data=params,
                files={
                    "file": (
                        file.filename,
                        file.content,
                        file.content_type or "application/octet-stream",
                    )
                },
                timeout=30,
            )
        except httpx.HTTPError as exc:
            logger.exception("Cloudinary upload failed", extra={"file": file.filename})
            return PhotoUploadResult(error=str(exc) or type(exc).__name__)
        payload = _json_or_empty(response)
        error = _error_message(response, payload)
        if error is not None:
            return PhotoUploadResult(error=error)
        url = payload.get("secure_url")
        public_id = payload.get("public_id")
        if not url or not public_id:
            return PhotoUploadResult(
                error="Photo service response is missing the image url or id"
            )
        return PhotoUploadResult(url=str(url), public_id=str(public_id))

    async def delete(self, public_id: str) -> PhotoDeletionResult:
        """Destroy a hosted image."""
        params = self._signed({"public_id": public_id})
        try:
            response = await self.http_client.post(
                f"{self.base_url}/{self.cloud_name}/image/destroy",
                data=params,
                timeout=15,
            )
        except httpx.HTTPError as exc:
            logger.exception(
                "Cloudinary destroy failed", extra={"public_id": public_id}
            )
            return PhotoDeletionResult(error=str(exc) or type(exc).__name__)
        payload = _json_or_empty(response)
        return PhotoDeletionResult(error=_error_message(response, payload))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        signed = {**params, "timestamp": str(int(time.time()))}
        signed["signature"] = sign_params(signed, self.api_secret)
        signed["api_key"] = self.api_key
        return signed


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Return the Cloudinary SHA-1 signature for request parameters."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key])
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


def _json_or_empty(response: httpx.Response) -> dict[str, object]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _error_message(response: httpx.Response, payload: dict[str, object]) -> str | None:
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if response.is_error:
        return f"Photo service responded with {response.status_code}"
    return None
