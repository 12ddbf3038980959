"""Cloudinary upload sink using the signed upload REST endpoint."""

from __future__ import annotations

import hashlib
import time
from typing import Any

import httpx

from ..logging import get_logger
from .base import UploadError, UploadSink

logger = get_logger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Compute the Cloudinary request signature.

    The signed string is the parameters sorted by name, joined as ``k=v`` with
    ``&``, followed directly by the API secret, hashed with SHA-1.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()


class CloudinaryUploadSink(UploadSink):
    """Uploads inline images to a Cloudinary cloud."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.upload_url = f"{CLOUDINARY_API_BASE}/{cloud_name}/image/upload"
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def upload(self, payload: str, folder: str) -> str:
        params = {"folder": folder, "timestamp": int(time.time())}
        data = {
            **params,
            "file": payload,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }

        try:
            response = await self._http_client.post(self.upload_url, data=data)
        except httpx.HTTPError as e:
            logger.error("Image upload request failed", cloud_name=self.cloud_name, error=str(e))
            raise UploadError(f"Image upload failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "Image upload rejected",
                cloud_name=self.cloud_name,
                status_code=response.status_code,
                error=message,
            )
            raise UploadError(f"Image upload failed: {message}")

        try:
            body = response.json()
        except ValueError as e:
            raise UploadError("Image upload failed: response was not JSON") from e

        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            raise UploadError("Image upload failed: response did not include a URL")

        logger.info("Image uploaded", folder=folder, url=secure_url)
        return secure_url

    async def aclose(self) -> None:
        await self._http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"
