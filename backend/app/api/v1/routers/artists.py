from fastapi import APIRouter, Depends
from tortoise.functions import Count

from app.api.v1.deps import get_current_user, parse_uuid
from app.api.v1.pagination import PageParams, page_params
from app.api.v1.serializers import public_cards, user_public
from app.core.errors import EmptyResultError, NotFoundError
from app.core.responses import envelope
from app.models import Collection, User

router = APIRouter(prefix="/artists", tags=["artists"])

@router.get("")
async def list_artists(
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    """
    Paginated artist directory: username, profile picture and the number of
    published collections of each artist.
    """
    base = User.filter(is_artist=True)
    total = await base.count()
    artists = await base.order_by("username").offset(paging.offset).limit(paging.limit)
    if not artists:
        raise EmptyResultError("No artists found")

    counts = {
        str(creator_id): n
        for creator_id, n in await Collection.filter(
            created_by_id__in=[a.id for a in artists], is_published=True, is_active=True
        )
        .annotate(n=Count("id"))
        .group_by("created_by_id")
        .values_list("created_by_id", "n")
    }
    rows = []
    for a in artists:
        item = user_public(a)
        item["collectionCount"] = counts.get(str(a.id), 0)
        rows.append(item)
    return envelope({"artists": rows, "totalCount": total, **paging.meta(total)})

@router.get("/{artist_id}")
async def show_artist(artist_id: str, user: User = Depends(get_current_user)):
    """
    Artist profile with their published collections and the aggregates over
    them (total likes, views and the mean of the per-collection averages).
    """
    aid = parse_uuid(artist_id)
    artist = await User.get_or_none(id=aid, is_artist=True) if aid else None
    if not artist:
        raise NotFoundError("Artist not found")

    collections = (
        await Collection.filter(created_by_id=artist.id, is_published=True, is_active=True)
        .order_by("-created_at")
        .prefetch_related("created_by", "likes", "views", "ratings")
    )
    cards = await public_cards(collections, user)
    rated = [c["averageRating"] for c in cards if c["ratingsCount"]]
    data = {
        "artist": user_public(artist),
        "collections": cards,
        "collectionCount": len(cards),
        "totalLikes": sum(c["likesCount"] for c in cards),
        "totalViews": sum(c["viewsCount"] for c in cards),
        "averageRating": sum(rated) / len(rated) if rated else 0,
    }
    return envelope(data)
