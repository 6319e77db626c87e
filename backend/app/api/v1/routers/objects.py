import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form

from app.api.v1.deps import get_current_user, parse_uuid, require_artist
from app.api.v1.guards import can_view, load_owned
from app.api.v1.serializers import object_to_dict
from app.api.v1.uploads import MODEL_FILE, THUMBNAIL, ValidFile, parse_form_json, validated_file
from app.core.errors import EmptyResultError, NotFoundError, ValidationError
from app.core.responses import created, envelope
from app.models import ArtObject, Collection, User
from app.models.art_object import DEFAULT_OBJECT_DESCRIPTION
from app.schemas.art_object import ObjectIn
from app.services.collections import delete_object_rows, ordered_objects
from app.services.media_base import MediaStore
from app.services.media_factory import delete_quietly, get_media_store

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/objects", tags=["objects"])

TITLE_MAX = 35
DESCRIPTION_MAX = 500

def clean_object(payload: ObjectIn, partial: bool = False) -> dict:
    fields: dict = {}
    if payload.title is not None or not partial:
        title = (payload.title or "").strip()
        if not 1 <= len(title) <= TITLE_MAX:
            raise ValidationError(f"Title must be between 1 and {TITLE_MAX} characters.")
        fields["title"] = title
    if payload.description is not None or not partial:
        description = (payload.description or "").strip()
        if len(description) > DESCRIPTION_MAX:
            raise ValidationError(f"Description cannot exceed {DESCRIPTION_MAX} characters.")
        fields["description"] = description or DEFAULT_OBJECT_DESCRIPTION
    return fields

@router.post("")
async def create_object(
    user: User = Depends(require_artist),
    meta: Optional[str] = Form(None, alias="object"),
    model_file: ValidFile = Depends(validated_file(MODEL_FILE)),
    store: MediaStore = Depends(get_media_store),
):
    """
    Upload a 3D object (multipart: `object` JSON {title, description} + `file` .glb).

    Errors:
        - 400: invalid metadata, missing file, wrong type or file over 20 MB
        - 401/403: anonymous or non-artist caller
    """
    fields = clean_object(parse_form_json(ObjectIn, meta, "object"))
    ref = await store.upload(model_file.content, model_file.filename, "object")
    try:
        row = await ArtObject.create(**fields, file=ref.to_dict(), uploaded_by_id=user.id)
    except Exception:
        await delete_quietly(store, ref.to_dict(), "object")
        raise
    logger.info("[objects] %s uploaded object %s (%d bytes)", user.id, row.id, model_file.size)
    return created({"object": object_to_dict(row)}, message="Object uploaded successfully")

@router.get("")
async def my_objects(user: User = Depends(require_artist)):
    """Objects uploaded by the caller, newest first."""
    rows = await ArtObject.filter(uploaded_by_id=user.id).order_by("-created_at")
    if not rows:
        raise EmptyResultError("No objects found")
    return envelope({"objects": [object_to_dict(o) for o in rows]})

@router.get("/collection/{collection_id}")
async def objects_of_collection(collection_id: str, user: User = Depends(get_current_user)):
    """Ordered objects of a collection the caller owns or that is publicly visible."""
    cid = parse_uuid(collection_id)
    collection = await Collection.get_or_none(id=cid) if cid else None
    if not collection or not can_view(collection, user):
        raise NotFoundError("Collection not found")
    objects = await ordered_objects(collection)
    if not objects:
        raise EmptyResultError("No objects found")
    return envelope({"objects": [object_to_dict(o) for o in objects]})

@router.get("/{object_id}")
async def show_object(object_id: str, user: User = Depends(require_artist)):
    row = await load_owned(ArtObject, object_id, user, "uploaded_by", "object")
    return envelope({"object": object_to_dict(row)})

@router.put("/{object_id}")
async def update_object(object_id: str, body: ObjectIn, user: User = Depends(require_artist)):
    """Change title and/or description of an owned object."""
    row = await load_owned(ArtObject, object_id, user, "uploaded_by", "object")
    fields = clean_object(body, partial=True)
    if fields:
        row.update_from_dict(fields)
        await row.save()
    return envelope({"object": object_to_dict(row)}, message="Object updated successfully")

@router.delete("/{object_id}")
async def delete_object(
    object_id: str,
    user: User = Depends(require_artist),
    store: MediaStore = Depends(get_media_store),
):
    """
    Delete an owned object.

    The hosted model file is removed first: if that fails the request fails
    (500) and nothing is deleted from the database. A failing thumbnail removal
    is only logged. Collection memberships and placements go with the object.
    """
    row = await load_owned(ArtObject, object_id, user, "uploaded_by", "object")
    if row.file and row.file.get("fileName"):
        await store.delete(row.file["fileName"], "object")
    await delete_quietly(store, row.thumbnail, "thumbnail")
    await delete_object_rows(row)
    logger.info("[objects] %s deleted object %s", user.id, row.id)
    return envelope({"id": str(row.id)}, message="Object deleted successfully")

@router.put("/{object_id}/thumbnail")
async def set_thumbnail(
    object_id: str,
    user: User = Depends(require_artist),
    thumbnail: ValidFile = Depends(validated_file(THUMBNAIL)),
    store: MediaStore = Depends(get_media_store),
):
    """Replace the thumbnail (jpg/png, max 1 MB). The previous asset is deleted first."""
    row = await load_owned(ArtObject, object_id, user, "uploaded_by", "object")
    if row.thumbnail and row.thumbnail.get("fileName"):
        await store.delete(row.thumbnail["fileName"], "thumbnail")
        row.thumbnail = None
        await row.save()
    ref = await store.upload(thumbnail.content, thumbnail.filename, "thumbnail")
    row.thumbnail = ref.to_dict()
    await row.save()
    return envelope({"object": object_to_dict(row)}, message="Thumbnail updated successfully")

@router.delete("/{object_id}/thumbnail")
async def delete_thumbnail(
    object_id: str,
    user: User = Depends(require_artist),
    store: MediaStore = Depends(get_media_store),
):
    row = await load_owned(ArtObject, object_id, user, "uploaded_by", "object")
    if not row.thumbnail or not row.thumbnail.get("fileName"):
        raise NotFoundError("Object has no thumbnail")
    await store.delete(row.thumbnail["fileName"], "thumbnail")
    row.thumbnail = None
    await row.save()
    return envelope({"object": object_to_dict(row)}, message="Thumbnail deleted successfully")
