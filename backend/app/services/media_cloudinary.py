"""
Cloudinary Media Store

Signed uploads/destroys against the Cloudinary REST API using httpx.
3D models are stored as "raw" resources, everything else as images.
"""
import hashlib
import logging
import re
import time
import uuid
from pathlib import PurePath

import httpx

from .media_base import ASSET_FOLDERS, AssetKind, AssetRef, MediaStore
from ..config import settings
from ..core.errors import DependencyError

logger = logging.getLogger(__name__)


def _resource_type(kind: AssetKind) -> str:
    return "raw" if kind == "object" else "image"


def unique_public_id(original_name: str) -> str:
    """uuid4 + original stem with whitespace runs replaced by hyphens"""
    stem = PurePath(original_name or "file").stem
    slug = re.sub(r"\s+", "-", stem)
    return f"{uuid.uuid4()}_{slug}"


def sign_params(params: dict, api_secret: str) -> str:
    """Cloudinary signature: sha1 of sorted `k=v` pairs joined by '&' followed by the secret"""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryMediaStore(MediaStore):
    """Cloudinary upload API"""

    def __init__(self):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.api_base = settings.cloudinary_api_base
        self.timeout = settings.media_timeout_sec

    @property
    def name(self) -> str:
        return "Cloudinary"

    def is_available(self) -> bool:
        """Check if credentials are configured"""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _endpoint(self, kind: AssetKind, action: str) -> str:
        return f"{self.api_base}/{self.cloud_name}/{_resource_type(kind)}/{action}"

    def _signed(self, params: dict) -> dict:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def upload(self, content: bytes, original_name: str, kind: AssetKind) -> AssetRef:
        if not self.is_available():
            raise DependencyError(f"{self.name}: credentials not configured")

        data = self._signed({
            "folder": ASSET_FOLDERS[kind],
            "public_id": unique_public_id(original_name),
        })
        files = {"file": (original_name, content)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self._endpoint(kind, "upload"), data=data, files=files)
            resp.raise_for_status()
            result = resp.json()
        except httpx.HTTPError as e:
            logger.error("[media] upload of %s (%s) failed: %s", original_name, kind, e)
            raise DependencyError(f"Error uploading {kind} to {self.name}") from e

        # Raw resources carry no format; fall back to the original extension
        file_type = result.get("format") or PurePath(original_name).suffix.lstrip(".").lower()
        return AssetRef(
            file_name=result["public_id"],
            file_path=result.get("secure_url") or result.get("url", ""),
            file_type=file_type,
            file_size=int(result.get("bytes") or len(content)),
        )

    async def delete(self, file_name: str, kind: AssetKind) -> None:
        if not self.is_available():
            raise DependencyError(f"{self.name}: credentials not configured")

        data = self._signed({"public_id": file_name})
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self._endpoint(kind, "destroy"), data=data)
            resp.raise_for_status()
            result = resp.json()
        except httpx.HTTPError as e:
            logger.error("[media] delete of %s (%s) failed: %s", file_name, kind, e)
            raise DependencyError(f"Error deleting {kind} from {self.name}") from e

        if result.get("result") == "not found":
            logger.info("[media] %s not found on %s, nothing to delete", file_name, self.name)


# Global singleton
cloudinary_media_store = CloudinaryMediaStore()
