from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.pagination import PageParams, page_params
from app.api.v1.deps import get_current_user
from app.api.v1.serializers import public_cards, user_public
from app.core.errors import EmptyResultError, ValidationError
from app.core.responses import envelope
from app.models import Collection, User
from app.services.search import merge_unique, query_terms, rank_by_terms, terms_filter

router = APIRouter(prefix="/search", tags=["search"])

COLLECTION_TEXT_FIELDS = ("title", "description", "city")
ARTIST_TEXT_FIELDS = ("username", "first_name", "last_name")

def _required(query: Optional[str]) -> str:
    query = (query or "").strip()
    if not query:
        raise ValidationError("Search query is required")
    return query

async def two_strategy(base, query: str, text_fields, text_of, substring_field: str) -> list:
    """Term-ranked matches first, then substring matches, deduplicated by id."""
    terms = query_terms(query)
    term_hits = []
    if terms:
        term_hits = rank_by_terms(await base.filter(terms_filter(text_fields, terms)), terms, text_of)
    substring_hits = await base.filter(**{f"{substring_field}__icontains": query}).order_by("-created_at")
    return merge_unique(term_hits, substring_hits)

def _page_of(rows: list, paging: PageParams) -> list:
    page = rows[paging.offset:paging.offset + paging.limit]
    if not page:
        raise EmptyResultError("No results found")
    return page

@router.get("/collections")
async def search_collections(
    query: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    """Search published, active collections by title, description and city."""
    query = _required(query)
    rows = await two_strategy(
        Collection.filter(is_published=True, is_active=True),
        query,
        COLLECTION_TEXT_FIELDS,
        lambda c: " ".join((c.title, c.description or "", c.city)),
        "title",
    )
    page = _page_of(rows, paging)
    await Collection.fetch_for_list(page, "created_by", "likes", "views", "ratings")
    data = {"collections": await public_cards(page, user), "totalCount": len(rows)}
    data.update(paging.meta(len(rows)))
    return envelope(data)

@router.get("/artists")
async def search_artists(
    query: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    paging: PageParams = Depends(page_params),
):
    """Search artists by username and name."""
    query = _required(query)
    rows = await two_strategy(
        User.filter(is_artist=True),
        query,
        ARTIST_TEXT_FIELDS,
        lambda u: " ".join((u.username, u.first_name, u.last_name)),
        "username",
    )
    page = _page_of(rows, paging)
    data = {"artists": [user_public(u) for u in page], "totalCount": len(rows)}
    data.update(paging.meta(len(rows)))
    return envelope(data)
