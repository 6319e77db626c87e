# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import register_error_handlers

from app.api.v1.routers import (
    artist_collections,
    artists,
    auth,
    collections,
    genres,
    objects,
    placed_objects,
    purchases,
    search,
    tokens,
    users,
)

from app.core.bootstrap import ensure_default_genres
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS for the mobile/web clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uniform {status, code, message, data} errors
register_error_handlers(app)

@app.on_event("startup")
async def on_startup():
    await init_db()
    # Seed the genre taxonomy on first run
    await ensure_default_genres()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(artists.router, prefix="/api/v1")
app.include_router(artist_collections.router, prefix="/api/v1")
app.include_router(collections.router, prefix="/api/v1")
app.include_router(objects.router, prefix="/api/v1")
app.include_router(placed_objects.router, prefix="/api/v1")
app.include_router(purchases.router, prefix="/api/v1")
app.include_router(genres.router, prefix="/api/v1")
app.include_router(search.router, prefix="/api/v1")
app.include_router(tokens.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
