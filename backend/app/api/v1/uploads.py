"""
Multipart helpers: file validation dependencies and JSON-in-form payload parsing.

Files are checked (extension, MIME type, size) before the controller runs; a
failing file is rejected with 400.
"""
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Type, TypeVar

import pydantic
from fastapi import File, UploadFile

from app.config import settings
from app.core.errors import ValidationError

T = TypeVar("T", bound=pydantic.BaseModel)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")
IMAGE_MIME_TYPES = ("image/jpeg", "image/png")
MODEL_EXTENSIONS = (".glb",)
MODEL_MIME_TYPES = ("model/gltf-binary", "application/octet-stream")


@dataclass(frozen=True)
class UploadRule:
    field: str  # Multipart field name
    extensions: tuple[str, ...]
    mime_types: tuple[str, ...]
    limit_attr: str  # Name of the settings attribute holding the byte limit

    @property
    def max_bytes(self) -> int:
        return getattr(settings, self.limit_attr)


@dataclass
class ValidFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


COVER_IMAGE = UploadRule("coverImage", IMAGE_EXTENSIONS, IMAGE_MIME_TYPES, "max_image_bytes")
PROFILE_PICTURE = UploadRule("profilePicture", IMAGE_EXTENSIONS, IMAGE_MIME_TYPES, "max_image_bytes")
THUMBNAIL = UploadRule("thumbnail", IMAGE_EXTENSIONS, IMAGE_MIME_TYPES, "max_image_bytes")
MODEL_FILE = UploadRule("file", MODEL_EXTENSIONS, MODEL_MIME_TYPES, "max_model_bytes")


async def check_upload(upload: Optional[UploadFile], rule: UploadRule, required: bool) -> Optional[ValidFile]:
    if upload is None or not upload.filename:
        if required:
            raise ValidationError("No file uploaded.")
        return None

    ext = PurePath(upload.filename).suffix.lower()
    content_type = (upload.content_type or "").lower()
    if ext not in rule.extensions or content_type not in rule.mime_types:
        raise ValidationError(f"Invalid file type. Allowed: {', '.join(rule.mime_types)}")

    content = await upload.read()
    if len(content) > rule.max_bytes:
        max_mb = -(-rule.max_bytes // (1024 * 1024))  # ceil
        raise ValidationError(f"File is too large. Max size allowed: {max_mb} MB.")
    return ValidFile(filename=upload.filename, content_type=content_type, content=content)


def validated_file(rule: UploadRule, required: bool = True):
    """
    Dependency factory: `file: ValidFile = Depends(validated_file(COVER_IMAGE))`.
    List it after the auth dependency so anonymous requests fail with 401 first.
    """
    async def dependency(upload: Optional[UploadFile] = File(None, alias=rule.field)) -> Optional[ValidFile]:
        return await check_upload(upload, rule, required)

    return dependency


def parse_form_json(schema: Type[T], raw: Optional[str], field: str) -> T:
    """Parse a JSON document sent as a multipart text field into `schema`."""
    if not raw:
        raise ValidationError(f"Missing '{field}' data.")
    try:
        return schema.model_validate_json(raw)
    except pydantic.ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        loc = ".".join(str(p) for p in first.get("loc", ()))
        msg = first.get("msg", "invalid value")
        raise ValidationError(f"{loc}: {msg}" if loc else msg)
