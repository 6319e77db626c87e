import logging

from fastapi import APIRouter, Depends

from app.api.v1.deps import get_current_user, parse_uuid, require_artist
from app.api.v1.guards import can_view, check_access, ensure_access, load_owned
from app.api.v1.serializers import placed_to_dict
from app.core.errors import EmptyResultError, NotFoundError
from app.core.responses import created, envelope
from app.models import ArtObject, Collection, PlacedObject, User
from app.schemas.placed_object import PlacedObjectIn

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/placed-objects", tags=["placed-objects"])

def transform_fields(body: PlacedObjectIn) -> dict:
    return {
        "position": body.position.model_dump(),
        "scale": body.scale.model_dump(),
        "rotation": body.rotation.model_dump(),
        "device_heading": body.deviceHeading,
        "origin": body.origin.model_dump(),
    }

@router.post("")
async def save_placement(body: PlacedObjectIn, user: User = Depends(require_artist)):
    """
    Upsert a placement keyed by the client-side `placedObjectId`.

    - id names an existing placement of this collection -> its transform is updated (200)
    - otherwise a new placement is created (201); a UUID `placedObjectId`
      that is still free becomes the new placement's id

    The caller must own both the collection and the object.
    """
    collection = await load_owned(Collection, body.collectionId, user, "created_by", "collection")
    obj = await load_owned(ArtObject, body.objectId, user, "uploaded_by", "object")
    fields = transform_fields(body)

    pid = parse_uuid(body.placedObjectId)
    existing = await PlacedObject.get_or_none(id=pid, collection_id=collection.id) if pid else None
    if existing:
        existing.update_from_dict(fields)
        existing.object = obj
        await existing.save()
        return envelope({"placedObject": placed_to_dict(existing, with_object=True)}, message="Placed object updated")

    extra = {}
    if pid and not await PlacedObject.filter(id=pid).exists():
        extra["id"] = pid
    row = await PlacedObject.create(collection_id=collection.id, object_id=obj.id, **fields, **extra)
    row.object = obj
    logger.info("[placed-objects] %s placed object %s in collection %s", user.id, obj.id, collection.id)
    return created({"placedObject": placed_to_dict(row, with_object=True)}, message="Placed object created")

@router.get("/collection/{collection_id}")
async def placements_of_collection(collection_id: str, user: User = Depends(get_current_user)):
    """All placements of a collection, each with its object populated."""
    cid = parse_uuid(collection_id)
    collection = await Collection.get_or_none(id=cid) if cid else None
    if not collection or not can_view(collection, user):
        raise NotFoundError("Collection not found")
    rows = (
        await PlacedObject.filter(collection_id=collection.id)
        .order_by("created_at")
        .prefetch_related("object")
    )
    if not rows:
        raise EmptyResultError("No placed objects found")
    return envelope({"placedObjects": [placed_to_dict(p, with_object=True) for p in rows]})

@router.get("/{placed_id}")
async def show_placement(placed_id: str, user: User = Depends(get_current_user)):
    pid = parse_uuid(placed_id)
    row = await PlacedObject.get_or_none(id=pid).prefetch_related("collection", "object") if pid else None
    if not row or not can_view(row.collection, user):
        raise NotFoundError("Placed object not found")
    return envelope({"placedObject": placed_to_dict(row, with_object=True)})

@router.delete("/{placed_id}")
async def delete_placement(placed_id: str, user: User = Depends(require_artist)):
    """Only the creator of the placement's collection may delete it; anyone else gets 404."""
    pid = parse_uuid(placed_id)
    row = await PlacedObject.get_or_none(id=pid).prefetch_related("collection") if pid else None
    if not row:
        raise NotFoundError("Placed object not found")
    ensure_access(check_access(user, row.collection, "created_by"), "placed object")
    await row.delete()
    return envelope({"id": str(pid)}, message="Placed object deleted")
