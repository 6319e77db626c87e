"""
Media Store Factory

Uses Cloudinary for asset hosting. Exposed as a FastAPI dependency so tests
can swap the store via `app.dependency_overrides`.
"""
import logging

from .media_base import AssetKind, AssetRef, MediaStore
from .media_cloudinary import cloudinary_media_store
from ..core.errors import DependencyError

logger = logging.getLogger(__name__)


def get_media_store() -> MediaStore:
    """
    Get the media store

    Note:
    - Need to configure CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET in .env
    """
    if not cloudinary_media_store.is_available():
        raise DependencyError("Media store not available. Please configure Cloudinary credentials in .env")
    return cloudinary_media_store


async def delete_quietly(store: MediaStore, asset: dict | None, kind: AssetKind) -> bool:
    """
    Best-effort delete used where a failure must not abort the surrounding operation.
    Returns False (and logs) when the delete failed.
    """
    ref = AssetRef.from_dict(asset)
    if ref is None:
        return True
    try:
        await store.delete(ref.file_name, kind)
    except DependencyError as e:
        logger.warning("[media] leaving orphaned %s %s: %s", kind, ref.file_name, e.message)
        return False
    return True
