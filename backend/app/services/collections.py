"""
Collection domain helpers shared by the artist-scoped and public routers.
"""
import logging
from typing import Iterable, Optional, Sequence

from tortoise.functions import Count
from tortoise.transactions import in_transaction

from app.models.art_object import ArtObject
from app.models.collection import Collection, CollectionObject, CollectionRating
from app.models.placed_object import PlacedObject
from app.models.purchase import Purchase
from app.models.user import User
from .media_base import MediaStore
from .media_factory import delete_quietly

logger = logging.getLogger(__name__)


def average_rating(values: Iterable[int]) -> float:
    values = list(values)
    if not values:
        return 0
    return sum(values) / len(values)


def collection_stats(collection: Collection, viewer: Optional[User] = None) -> dict:
    """
    Read-time aggregates. Expects `likes`, `views` and `ratings` to be prefetched.
    """
    ratings = [r.rating for r in collection.ratings]
    stats = {
        "likesCount": len(collection.likes),
        "viewsCount": len(collection.views),
        "ratingsCount": len(ratings),
        "averageRating": average_rating(ratings),
    }
    if viewer is not None:
        stats["liked"] = any(u.id == viewer.id for u in collection.likes)
        mine = next((r.rating for r in collection.ratings if r.user_id == viewer.id), None)
        stats["rated"] = mine
    return stats


def append_unique(current: Sequence, requested: Sequence) -> list:
    """
    Append-with-dedup: keep `current` order, then add every requested id that is
    not present yet (first occurrence wins).
    """
    seen = {str(i) for i in current}
    merged = list(current)
    for item in requested:
        key = str(item)
        if key not in seen:
            seen.add(key)
            merged.append(item)
    return merged


async def ordered_object_ids(collection: Collection, using_db=None) -> list:
    qs = CollectionObject.filter(collection_id=collection.id).order_by("position")
    if using_db is not None:
        qs = qs.using_db(using_db)
    return [e.object_id for e in await qs]


async def write_object_list(collection: Collection, object_ids: Sequence, using_db=None) -> None:
    """Replace the stored membership rows with `object_ids` in order."""
    qs = CollectionObject.filter(collection_id=collection.id)
    if using_db is not None:
        qs = qs.using_db(using_db)
    await qs.delete()
    if object_ids:
        await CollectionObject.bulk_create(
            [
                CollectionObject(collection_id=collection.id, object_id=oid, position=pos)
                for pos, oid in enumerate(object_ids)
            ],
            using_db=using_db,
        )


async def delete_object_rows(obj: ArtObject) -> None:
    """Drop an object together with its placements and collection memberships."""
    async with in_transaction() as conn:
        await PlacedObject.filter(object_id=obj.id).using_db(conn).delete()
        await CollectionObject.filter(object_id=obj.id).using_db(conn).delete()
        await obj.delete(using_db=conn)


async def delete_collection_cascade(collection: Collection, store: MediaStore) -> None:
    """
    Remove placements, purchases, ratings and memberships, then the collection
    itself (one transaction), then release the cover asset. A failed cover
    deletion is logged and does not undo the database delete.
    """
    cid = collection.id
    async with in_transaction() as conn:
        await PlacedObject.filter(collection_id=cid).using_db(conn).delete()
        await Purchase.filter(collection_id=cid).using_db(conn).delete()
        await CollectionRating.filter(collection_id=cid).using_db(conn).delete()
        await CollectionObject.filter(collection_id=cid).using_db(conn).delete()
        await collection.genres.clear(using_db=conn)
        await collection.likes.clear(using_db=conn)
        await collection.views.clear(using_db=conn)
        await collection.delete(using_db=conn)
    logger.info("[collections] deleted collection %s", cid)
    await delete_quietly(store, collection.cover_image, "coverImage")


async def object_counts(collection_ids: Sequence) -> dict:
    """Number of member objects per collection id (as string); missing ids count 0."""
    if not collection_ids:
        return {}
    rows = (
        await CollectionObject.filter(collection_id__in=list(collection_ids))
        .annotate(n=Count("id"))
        .group_by("collection_id")
        .values_list("collection_id", "n")
    )
    return {str(cid): n for cid, n in rows}


async def ordered_objects(collection: Collection) -> list:
    entries = (
        await CollectionObject.filter(collection_id=collection.id)
        .order_by("position")
        .prefetch_related("object")
    )
    return [e.object for e in entries]
