import uuid
from typing import Any
from fastapi import Depends, Header
from app.core.errors import AuthenticationError, AuthorizationError
from app.core.security import decode_access_token, issued_before
from app.models.user import User

def parse_uuid(value: Any) -> uuid.UUID | None:
    """Return `value` as a UUID, or None when it is not one (treated as "not found" by callers)."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None

async def get_current_user(
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts the JWT from the `Authorization: Bearer <token>` header, validates it
    and loads the user. Runs before any controller logic, so anonymous requests
    are rejected before payloads or uploads are looked at.

    Raises:
        AuthenticationError (401): no token, invalid/expired token, token issued
            before the last password change, or user no longer exists

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        raise AuthenticationError("Unauthorized")

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
    except Exception:
        raise AuthenticationError("Invalid or expired token")

    uid = parse_uuid(user_id)
    user = await User.get_or_none(id=uid) if uid else None
    if not user:
        raise AuthenticationError("User not found")
    if issued_before(payload, user.password_changed_at):
        raise AuthenticationError("Token revoked, please log in again")
    return user

async def require_artist(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current user is an artist.

    Builds on `get_current_user` (401 when anonymous) and adds the role check.

    Raises:
        AuthorizationError (403): If user is not an artist
    """
    if not current.is_artist:
        raise AuthorizationError("Forbidden: only artists can perform this action")
    return current
