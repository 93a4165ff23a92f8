import hashlib
import os
import time
from typing import Dict, Optional

import requests

from shared.core.config import settings
from shared.core.exceptions import BadRequestError
from shared.core.logger import AppLogger

logger = AppLogger("image_host")

CLOUDINARY_API_URL = "https://api.cloudinary.com/v1_1"

MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MB


class ImageHostError(Exception):
    pass


class CloudinaryClient:
    """Minimal Cloudinary client: signed upload from bytes and destroy by public id."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, action: str) -> str:
        return f"{CLOUDINARY_API_URL}/{self.cloud_name}/image/{action}"

    def _sign(self, params: Dict[str, str]) -> str:
        # https://cloudinary.com/documentation/authentication_signatures
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed_params(self, params: Dict[str, str]) -> Dict[str, str]:
        params = dict(params, timestamp=str(int(time.time())))
        params["signature"] = self._sign(params)
        params["api_key"] = self.api_key
        return params

    def upload_image_from_buffer(self, buffer: bytes, folder: str, filename: str = "upload") -> Dict[str, str]:
        try:
            response = self.session.post(
                self._url("upload"),
                data=self._signed_params({"folder": folder}),
                files={"file": (filename, buffer)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except requests.RequestException as e:
            logger.error("Cloudinary upload failed", {"folder": folder, "error": str(e)})
            raise ImageHostError("Cloudinary upload failed") from e

        if "secure_url" not in result or "public_id" not in result:
            raise ImageHostError("Cloudinary upload failed")

        return {"url": result["secure_url"], "public_id": result["public_id"]}

    def delete_image(self, public_id: str) -> None:
        try:
            response = self.session.post(
                self._url("destroy"),
                data=self._signed_params({"public_id": public_id}),
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except requests.RequestException as e:
            logger.error("Cloudinary deletion failed", {"publicId": public_id, "error": str(e)})
            raise ImageHostError("Cloudinary deletion failed") from e

        if result.get("result") not in ("ok", "not found"):
            raise ImageHostError("Cloudinary deletion failed")


def get_image_host() -> CloudinaryClient:
    return CloudinaryClient(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        timeout=settings.CLOUDINARY_TIMEOUT,
    )


def read_upload(upload) -> bytes:
    """Raw bytes of a multipart image upload (fastapi UploadFile), rejecting non-images and files over 5 MB."""
    if not (upload.content_type or "").startswith("image/"):
        raise BadRequestError("Only image files are allowed")

    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    if size > MAX_IMAGE_SIZE:
        raise BadRequestError("Image must not exceed 5 MB")

    upload.file.seek(0)
    return upload.file.read()
