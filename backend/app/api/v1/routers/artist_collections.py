import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form
from tortoise.transactions import in_transaction

from app.api.v1.deps import parse_uuid, require_artist
from app.api.v1.guards import load_owned
from app.api.v1.serializers import collection_detail, collection_summary
from app.api.v1.uploads import COVER_IMAGE, ValidFile, parse_form_json, validated_file
from app.config import settings
from app.core.errors import EmptyResultError, NotFoundError, ValidationError
from app.core.responses import created, envelope
from app.models import ArtObject, Collection, Genre, User
from app.models.collection import COLLECTION_TYPES, DEFAULT_COLLECTION_DESCRIPTION
from app.schemas.collection import CollectionIn, ObjectIdsIn
from app.services.collections import (
    append_unique,
    delete_collection_cascade,
    ordered_object_ids,
    ordered_objects,
    write_object_list,
)
from app.services.media_base import MediaStore
from app.services.media_factory import delete_quietly, get_media_store

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/artist/collections", tags=["artist-collections"])

TITLE_MAX = 35
DESCRIPTION_MAX = 1000

def _as_price(value: Any) -> Optional[int]:
    """Non-negative integer price, or None when `value` is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 0:
        return value
    return None

def clean_collection(payload: CollectionIn, partial: bool = False) -> dict:
    """
    Validate a create/update payload and return model field values.
    With `partial=True` only the provided fields are checked and returned.
    """
    fields: dict = {}

    if payload.type is not None or not partial:
        kind = (payload.type or "").strip().lower()
        if kind not in COLLECTION_TYPES:
            raise ValidationError("Invalid collection type.")
        fields["type"] = kind

    if payload.title is not None or not partial:
        title = (payload.title or "").strip()
        if not 1 <= len(title) <= TITLE_MAX:
            raise ValidationError(f"Title must be between 1 and {TITLE_MAX} characters.")
        fields["title"] = title

    if payload.city is not None or not partial:
        city = (payload.city or "").strip()
        if not city:
            raise ValidationError("Please fill in all required fields.")
        fields["city"] = city

    if payload.description is not None or not partial:
        description = (payload.description or "").strip()
        if len(description) > DESCRIPTION_MAX:
            raise ValidationError(f"Description cannot exceed {DESCRIPTION_MAX} characters.")
        fields["description"] = description or DEFAULT_COLLECTION_DESCRIPTION

    if payload.price is not None or not partial:
        price = _as_price(payload.price)
        if price is None:
            raise ValidationError("Price must be a non-negative integer.")
        fields["price"] = price

    if payload.location is not None:
        fields["lat"] = payload.location.lat
        fields["lon"] = payload.location.lon
    return fields

async def resolve_genres(genre_ids: list) -> list:
    """Every requested genre must exist, otherwise the whole request is rejected."""
    wanted = {parse_uuid(g) for g in genre_ids}
    if None in wanted:
        raise ValidationError("Some genres do not exist.")
    genres = await Genre.filter(id__in=list(wanted)) if wanted else []
    if len(genres) != len(wanted):
        raise ValidationError("Some genres do not exist.")
    return genres

async def _detail(collection: Collection, viewer: Optional[User] = None) -> dict:
    await collection.fetch_related("created_by", "genres", "likes", "views", "ratings")
    return collection_detail(collection, await ordered_objects(collection), viewer)

async def _owned_object_ids(raw_ids: list, owner: User, conn) -> list:
    """
    Resolve requested object ids against the caller's uploads.
    Raises 404 listing every id that is unknown or owned by someone else.
    """
    parsed = [parse_uuid(r) for r in raw_ids]
    valid = [p for p in parsed if p is not None]
    owned = set()
    if valid:
        owned = {
            str(i)
            for i in await ArtObject.filter(id__in=valid, uploaded_by_id=owner.id)
            .using_db(conn)
            .values_list("id", flat=True)
        }
    missing = [raw for raw, p in zip(raw_ids, parsed) if p is None or str(p) not in owned]
    if missing:
        raise NotFoundError("Some objects were not found", data={"missingObjectIds": missing})
    return parsed

@router.post("")
async def create_collection(
    user: User = Depends(require_artist),
    collection: Optional[str] = Form(None),
    cover: ValidFile = Depends(validated_file(COVER_IMAGE)),
    store: MediaStore = Depends(get_media_store),
):
    """
    Create a collection (multipart: `collection` JSON + `coverImage` file).

    New collections start unpublished and active.

    Errors:
        - 400: invalid payload, unknown genres, missing/invalid cover
        - 401/403: anonymous or non-artist caller
    """
    payload = parse_form_json(CollectionIn, collection, "collection")
    fields = clean_collection(payload)
    genres = await resolve_genres(payload.genres or [])

    ref = await store.upload(cover.content, cover.filename, "coverImage")
    try:
        async with in_transaction() as conn:
            row = await Collection.create(
                **fields,
                cover_image=ref.to_dict(),
                created_by_id=user.id,
                is_published=False,
                is_active=True,
                max_objects=settings.default_max_objects,
                using_db=conn,
            )
            if genres:
                await row.genres.add(*genres, using_db=conn)
    except Exception:
        await delete_quietly(store, ref.to_dict(), "coverImage")
        raise
    logger.info("[collections] %s created collection %s", user.id, row.id)
    return created({"collection": await _detail(row, user)}, message="Collection created successfully")

@router.get("")
async def my_collections(user: User = Depends(require_artist)):
    """The caller's collections, summary projection, newest first."""
    rows = await Collection.filter(created_by_id=user.id).order_by("-created_at")
    if not rows:
        raise EmptyResultError("No collections found")
    return envelope({"collections": [collection_summary(c) for c in rows]})

@router.get("/{collection_id}")
async def my_collection(collection_id: str, user: User = Depends(require_artist)):
    row = await load_owned(Collection, collection_id, user, "created_by", "collection")
    return envelope({"collection": await _detail(row, user)})

@router.put("/{collection_id}")
async def update_collection(
    collection_id: str,
    user: User = Depends(require_artist),
    collection: Optional[str] = Form(None),
    cover: Optional[ValidFile] = Depends(validated_file(COVER_IMAGE, required=False)),
    store: MediaStore = Depends(get_media_store),
):
    """
    Update an owned collection. Only provided fields change; `genres`, when
    present, replaces the genre set (an empty list removes every genre).

    A new cover is uploaded before the previous asset is removed; failing to
    remove the old asset is logged and does not fail the request.
    """
    row = await load_owned(Collection, collection_id, user, "created_by", "collection")
    payload = parse_form_json(CollectionIn, collection, "collection") if collection else CollectionIn()
    fields = clean_collection(payload, partial=True)
    genres = await resolve_genres(payload.genres) if payload.genres is not None else None

    previous_cover = None
    if cover is not None:
        ref = await store.upload(cover.content, cover.filename, "coverImage")
        previous_cover = row.cover_image
        fields["cover_image"] = ref.to_dict()

    async with in_transaction() as conn:
        row.update_from_dict(fields)
        await row.save(using_db=conn)
        if genres is not None:
            await row.genres.clear(using_db=conn)
            if genres:
                await row.genres.add(*genres, using_db=conn)

    if previous_cover:
        await delete_quietly(store, previous_cover, "coverImage")
    return envelope({"collection": await _detail(row, user)}, message="Collection updated successfully")

@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: str,
    user: User = Depends(require_artist),
    store: MediaStore = Depends(get_media_store),
):
    """Delete an owned collection with its placements, purchases and ratings."""
    row = await load_owned(Collection, collection_id, user, "created_by", "collection")
    await delete_collection_cascade(row, store)
    return envelope({"id": str(row.id)}, message="Collection deleted successfully")

@router.patch("/{collection_id}/add-objects")
async def add_objects(collection_id: str, body: ObjectIdsIn, user: User = Depends(require_artist)):
    """
    Append objects to an owned collection.

    Ids already in the collection are skipped, new ones are appended in the
    requested order. The whole request is rejected (collection unchanged) when
    an id is unknown or not owned by the caller (404, `missingObjectIds`), or
    when the result would exceed `maxObjects` (400).
    """
    if not body.objectIds:
        raise ValidationError("objectIds must be a non-empty array.")

    async with in_transaction() as conn:
        row = await load_owned(Collection, collection_id, user, "created_by", "collection", using_db=conn)
        requested = await _owned_object_ids(body.objectIds, user, conn)
        merged = append_unique(await ordered_object_ids(row, using_db=conn), requested)
        if len(merged) > row.max_objects:
            raise ValidationError(f"A collection can contain at most {row.max_objects} objects.")
        await write_object_list(row, merged, using_db=conn)

    return envelope({"collection": await _detail(row, user)}, message="Objects added successfully")

@router.put("/{collection_id}/objects")
async def replace_objects(collection_id: str, body: ObjectIdsIn, user: User = Depends(require_artist)):
    """Replace the ordered object list. An empty list clears the collection."""
    requested_ids = append_unique([], body.objectIds)
    async with in_transaction() as conn:
        row = await load_owned(Collection, collection_id, user, "created_by", "collection", using_db=conn)
        requested = await _owned_object_ids(requested_ids, user, conn)
        if len(requested) > row.max_objects:
            raise ValidationError(f"A collection can contain at most {row.max_objects} objects.")
        await write_object_list(row, requested, using_db=conn)

    return envelope({"collection": await _detail(row, user)}, message="Objects updated successfully")

@router.patch("/{collection_id}/publish")
async def toggle_publish(collection_id: str, user: User = Depends(require_artist)):
    row = await load_owned(Collection, collection_id, user, "created_by", "collection")
    row.is_published = not row.is_published
    await row.save()
    state = "published" if row.is_published else "unpublished"
    return envelope({"collection": collection_summary(row)}, message=f"Collection {state}")
