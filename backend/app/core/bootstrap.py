# app/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as seeding the genre taxonomy on first startup.
"""
import logging
from app.config import settings
from app.models.genre import GENRE_NAME_MAX, GENRE_NAME_RE, Genre

logger = logging.getLogger("uvicorn.error")

async def ensure_default_genres(names: list[str] | None = None) -> list[Genre]:
    """
    Create the configured genres that do not exist yet.

    Names come from SEED_GENRES (comma separated) unless given explicitly.
    Each name is stored in canonical form and matched case-insensitively, so
    running this on every startup is harmless. Invalid names are skipped.

    Returns:
        The genres created by this call
    """
    names = settings.seed_genres if names is None else names
    created = []
    for raw in names:
        raw = raw.strip()
        if not raw or len(raw) > GENRE_NAME_MAX or not GENRE_NAME_RE.match(raw):
            logger.warning("[bootstrap] Skipping invalid genre name %r", raw)
            continue
        name = Genre.canonical_name(raw)
        if await Genre.filter(name__iexact=name).exists():
            continue
        created.append(await Genre.create(name=name))

    if created:
        logger.info("[bootstrap] Seeded genres: %s", ", ".join(g.name for g in created))
    return created
