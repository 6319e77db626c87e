"""
Services Module

Provides interfaces for external services and shared domain logic:
- Media store: Cloudinary asset hosting (images, 3D models)
- Collections: aggregates, ordered object lists and cascading deletes
- Search: two-strategy (term + substring) lookup merge
"""

# Media store
from .media_base import (
    AssetKind,
    AssetRef,
    MediaStore,
)
from .media_factory import (
    delete_quietly,
    get_media_store,
)
from .media_cloudinary import cloudinary_media_store

__all__ = [
    # Media store - service interface
    "AssetKind",
    "AssetRef",
    "MediaStore",
    "get_media_store",
    "delete_quietly",
    "cloudinary_media_store",
]
