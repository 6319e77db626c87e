from fastapi import APIRouter, Depends
from tortoise.transactions import in_transaction

from app.api.v1.deps import get_current_user, parse_uuid
from app.api.v1.pagination import PageParams, page_params
from app.api.v1.serializers import collection_detail, public_cards
from app.core.errors import EmptyResultError, NotFoundError, ValidationError
from app.core.responses import envelope
from app.models import Collection, CollectionRating, Genre, User
from app.schemas.collection import RatingIn
from app.services.collections import average_rating, ordered_objects

router = APIRouter(prefix="/collections", tags=["collections"])

CARD_RELATIONS = ("created_by", "likes", "views", "ratings")
RATING_MIN, RATING_MAX = 0, 5

def visible():
    """Base queryset of collections open to discovery."""
    return Collection.filter(is_published=True, is_active=True)

async def get_visible(collection_id: str) -> Collection:
    cid = parse_uuid(collection_id)
    row = await visible().get_or_none(id=cid) if cid else None
    if not row:
        raise NotFoundError("Collection not found")
    return row

async def _page(qs, paging: PageParams, viewer: User, **extra):
    total = await qs.count()
    rows = (
        await qs.order_by("-created_at")
        .offset(paging.offset)
        .limit(paging.limit)
        .prefetch_related(*CARD_RELATIONS)
    )
    if not rows:
        raise EmptyResultError("No collections found")
    data = {"collections": await public_cards(rows, viewer), "totalCount": total, **extra}
    data.update(paging.meta(total))
    return envelope(data)

@router.get("")
async def list_collections(
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    """Published, active collections, newest first."""
    return await _page(visible(), paging, user)

@router.get("/creator/{creator_id}")
async def by_creator(
    creator_id: str,
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    cid = parse_uuid(creator_id)
    if cid is None:
        raise EmptyResultError("No collections found")
    return await _page(visible().filter(created_by_id=cid), paging, user)

@router.get("/genre/{genre_id}")
async def by_genre(
    genre_id: str,
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    """Collections tagged with a genre. 404 when the genre does not exist."""
    gid = parse_uuid(genre_id)
    genre = await Genre.get_or_none(id=gid) if gid else None
    if not genre:
        raise NotFoundError("Genre not found")
    qs = visible().filter(genres__id=genre.id).distinct()
    return await _page(qs, paging, user, genre={"id": str(genre.id), "name": genre.name})

@router.get("/{collection_id}")
async def show_collection(collection_id: str, user: User = Depends(get_current_user)):
    """
    Public view of one collection. Opening it records the caller as a viewer
    (a user counts once), and the response tells whether the caller liked
    and how they rated it.
    """
    row = await get_visible(collection_id)
    await row.views.add(user)
    await row.fetch_related("created_by", "genres", "likes", "views", "ratings")
    return envelope({"collection": collection_detail(row, await ordered_objects(row), user)})

@router.post("/{collection_id}/like")
async def toggle_like(collection_id: str, user: User = Depends(get_current_user)):
    """Like or unlike; calling twice restores the original state."""
    row = await get_visible(collection_id)
    if await row.likes.filter(id=user.id).exists():
        await row.likes.remove(user)
        liked = False
    else:
        await row.likes.add(user)
        liked = True
    likes_count = await row.likes.all().count()
    return envelope({"liked": liked, "likesCount": likes_count})

@router.post("/{collection_id}/rate")
async def rate_collection(collection_id: str, body: RatingIn, user: User = Depends(get_current_user)):
    """Set (or change) the caller's 0-5 rating."""
    if body.rating is None or not RATING_MIN <= body.rating <= RATING_MAX:
        raise ValidationError(f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}.")
    row = await get_visible(collection_id)
    async with in_transaction() as conn:
        existing = await CollectionRating.filter(collection_id=row.id, user_id=user.id).using_db(conn).first()
        if existing:
            existing.rating = body.rating
            await existing.save(using_db=conn)
        else:
            await CollectionRating.create(collection_id=row.id, user_id=user.id, rating=body.rating, using_db=conn)

    ratings = await CollectionRating.filter(collection_id=row.id).values_list("rating", flat=True)
    return envelope(
        {"rating": body.rating, "averageRating": average_rating(ratings), "ratingsCount": len(ratings)}
    )
