"""
Media Store Abstract Interface

Provides a unified interface for hosted binary assets (images and 3D models).
Controllers only deal with `AssetRef`, never with provider responses.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Optional

AssetKind = Literal["profileImage", "coverImage", "thumbnail", "object"]

# Folder on the media host for each asset kind
ASSET_FOLDERS: dict[str, str] = {
    "profileImage": "profile_images",
    "coverImage": "cover_images",
    "thumbnail": "thumbnails",
    "object": "objects",
}


@dataclass
class AssetRef:
    """Stable reference to a stored asset, persisted as JSON on the owning row"""
    file_name: str  # Provider identifier (used for deletion)
    file_path: str  # Public URL
    file_type: str  # Format / extension, e.g. "png", "glb"
    file_size: int  # Bytes

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "filePath": self.file_path,
            "fileType": self.file_type,
            "fileSize": self.file_size,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["AssetRef"]:
        if not data or not data.get("fileName"):
            return None
        return cls(
            file_name=data["fileName"],
            file_path=data.get("filePath", ""),
            file_type=data.get("fileType", ""),
            file_size=int(data.get("fileSize") or 0),
        )


class MediaStore(ABC):
    """Media store base class"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the service is configured"""
        pass

    @abstractmethod
    async def upload(self, content: bytes, original_name: str, kind: AssetKind) -> AssetRef:
        """
        Store `content` and return its reference.

        Raises:
        - DependencyError: the provider rejected the upload or could not be reached
        """
        pass

    @abstractmethod
    async def delete(self, file_name: str, kind: AssetKind) -> None:
        """
        Remove a stored asset. Deleting an asset the provider does not know is not an error.

        Raises:
        - DependencyError: the provider could not be reached or refused the request
        """
        pass
