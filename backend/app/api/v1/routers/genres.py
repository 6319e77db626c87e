from fastapi import APIRouter, Depends
from pydantic import BaseModel
from tortoise.exceptions import IntegrityError

from app.api.v1.deps import get_current_user, parse_uuid
from app.api.v1.serializers import genre_to_dict
from app.core.errors import ConflictError, EmptyResultError, NotFoundError, ValidationError
from app.core.responses import created, envelope
from app.models.genre import GENRE_NAME_MAX, GENRE_NAME_RE, Genre
from app.models.user import User

router = APIRouter(prefix="/genres", tags=["genres"])

class GenreIn(BaseModel):
    name: str | None = None

def normalize_genre_name(raw: str | None) -> str:
    """Validate a submitted name and return its canonical form."""
    name = (raw or "").strip()
    if not name:
        raise ValidationError("Name is required.")
    if len(name) > GENRE_NAME_MAX:
        raise ValidationError(f"Name must be between 1 and {GENRE_NAME_MAX} characters.")
    if not GENRE_NAME_RE.match(name):
        raise ValidationError("Name can only contain letters, digits, spaces and hyphens.")
    return Genre.canonical_name(name)

async def _ensure_name_free(name: str, exclude_id=None) -> None:
    qs = Genre.filter(name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ConflictError("Genre already exists.")

async def _get_genre(genre_id: str) -> Genre:
    gid = parse_uuid(genre_id)
    genre = await Genre.get_or_none(id=gid) if gid else None
    if not genre:
        raise NotFoundError("Genre not found.")
    return genre

@router.post("")
async def create_genre(body: GenreIn, user: User = Depends(get_current_user)):
    """
    Create a genre. Uniqueness is case-insensitive: "rock-n-roll" and
    "Rock-N-Roll" collide. The stored name is capitalised per segment.
    """
    name = normalize_genre_name(body.name)
    await _ensure_name_free(name)
    try:
        genre = await Genre.create(name=name)
    except IntegrityError:
        raise ConflictError("Genre already exists.")
    return created({"genre": genre_to_dict(genre)})

@router.get("")
async def list_genres(user: User = Depends(get_current_user)):
    genres = await Genre.all().order_by("name")
    if not genres:
        raise EmptyResultError("No genres found.")
    return envelope({"genres": [genre_to_dict(g) for g in genres]})

@router.get("/{genre_id}")
async def get_genre(genre_id: str, user: User = Depends(get_current_user)):
    genre = await _get_genre(genre_id)
    return envelope({"genre": genre_to_dict(genre)})

@router.put("/{genre_id}")
async def rename_genre(genre_id: str, body: GenreIn, user: User = Depends(get_current_user)):
    genre = await _get_genre(genre_id)
    name = normalize_genre_name(body.name)
    await _ensure_name_free(name, exclude_id=genre.id)
    genre.name = name
    await genre.save()
    return envelope({"genre": genre_to_dict(genre)})

@router.delete("/{genre_id}")
async def delete_genre(genre_id: str, user: User = Depends(get_current_user)):
    """Delete a genre; collections tagged with it simply lose the tag."""
    genre = await _get_genre(genre_id)
    await genre.collections.clear()
    await genre.delete()
    return envelope({"id": genre_id, "deleted": True})
