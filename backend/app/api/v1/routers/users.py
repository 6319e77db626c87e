import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.v1.deps import get_current_user
from app.api.v1.routers.auth import EMAIL_RE, taken_fields
from app.api.v1.serializers import user_private, user_public
from app.api.v1.uploads import PROFILE_PICTURE, ValidFile, validated_file
from app.core.errors import ConflictError, EmptyResultError, ValidationError
from app.core.responses import envelope
from app.models import ArtObject, Collection, CollectionRating, Purchase, User
from app.services.collections import delete_collection_cascade, delete_object_rows
from app.services.media_base import MediaStore
from app.services.media_factory import delete_quietly, get_media_store

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users", tags=["users"])

class ProfileUpdateIn(BaseModel):
    firstName: str | None = None
    lastName: str | None = None
    username: str | None = None
    email: str | None = None

@router.get("")
async def list_users(user: User = Depends(get_current_user)):
    """
    List all accounts (public fields only), newest first.
    204 when there are no users.
    """
    rows = await User.all().order_by("-created_at")
    if not rows:
        raise EmptyResultError("No users found")
    return envelope({"users": [user_public(u) for u in rows]})

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Profile of the logged-in user, including token balance."""
    return envelope({"user": user_private(user)})

@router.put("/me")
async def update_me(body: ProfileUpdateIn, user: User = Depends(get_current_user)):
    """
    Update profile fields. Only provided fields change.

    Errors:
        - 400: blank name fields or invalid email
        - 409: username/email taken by another account
    """
    for value in (body.firstName, body.lastName, body.username):
        if value is not None and not value.strip():
            raise ValidationError("Fields cannot be empty.")
    if body.email is not None and not EMAIL_RE.match(body.email):
        raise ValidationError("Please enter a valid email address.")

    conflicts = await taken_fields(body.username, body.email, exclude_id=user.id)
    if conflicts:
        raise ConflictError(f"Already in use: {', '.join(conflicts)}", data={"fields": conflicts})

    if body.firstName is not None:
        user.first_name = body.firstName.strip()
    if body.lastName is not None:
        user.last_name = body.lastName.strip()
    if body.username is not None:
        user.username = body.username.strip()
    if body.email is not None:
        user.email = body.email
    await user.save()
    return envelope({"user": user_private(user)})

@router.delete("/me")
async def delete_me(
    user: User = Depends(get_current_user),
    store: MediaStore = Depends(get_media_store),
):
    """
    Delete the account and everything it owns.

    Owned collections go through the collection cascade, owned objects are
    removed with their placements; hosted files are deleted best effort.
    """
    for collection in await Collection.filter(created_by_id=user.id):
        await delete_collection_cascade(collection, store)
    for obj in await ArtObject.filter(uploaded_by_id=user.id):
        await delete_object_rows(obj)
        await delete_quietly(store, obj.file, "object")
        await delete_quietly(store, obj.thumbnail, "thumbnail")

    await Purchase.filter(user_id=user.id).delete()
    await CollectionRating.filter(user_id=user.id).delete()
    await user.liked_collections.clear()
    await user.viewed_collections.clear()
    await user.delete()
    await delete_quietly(store, user.profile_picture, "profileImage")
    logger.info("[users] deleted account %s", user.id)
    return envelope(None, message="Account deleted")

@router.put("/me/profile-picture")
async def change_profile_picture(
    user: User = Depends(get_current_user),
    file: ValidFile = Depends(validated_file(PROFILE_PICTURE)),
    store: MediaStore = Depends(get_media_store),
):
    """
    Replace the profile picture (jpg/png, max 1 MB).
    The new image is uploaded before the previous one is removed.
    """
    previous = user.profile_picture
    ref = await store.upload(file.content, file.filename, "profileImage")
    user.profile_picture = ref.to_dict()
    await user.save()
    await delete_quietly(store, previous, "profileImage")
    return envelope({"user": user_private(user)})

@router.patch("/me/make-artist")
async def make_artist(user: User = Depends(get_current_user)):
    """Switch the account to an artist account. Idempotent."""
    if not user.is_artist:
        user.is_artist = True
        await user.save()
    return envelope({"user": user_private(user)})
