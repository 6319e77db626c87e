"""
Ownership guard shared by every artist-only mutation.

Checks run in a fixed order: principal present (401) -> principal is an artist (403)
-> resource exists and belongs to the principal (404). Ownership mismatches are
reported as 404 so the existence of other artists' resources is not leaked.
"""
from enum import Enum
from typing import Any, Optional, Type

from tortoise.models import Model

from app.api.v1.deps import parse_uuid
from app.core.errors import AuthenticationError, AuthorizationError, NotFoundError
from app.models.user import User


class Access(str, Enum):
    GRANTED = "granted"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


def check_access(principal: Optional[User], resource: Optional[Model], owner_field: str) -> Access:
    """
    Pure decision function; `owner_field` is the FK name on the resource
    (e.g. "created_by" for collections, "uploaded_by" for objects).
    """
    if principal is None:
        return Access.UNAUTHENTICATED
    if not principal.is_artist:
        return Access.FORBIDDEN
    if resource is None:
        return Access.NOT_FOUND
    owner_id = getattr(resource, f"{owner_field}_id", None)
    if owner_id is None or str(owner_id) != str(principal.id):
        return Access.NOT_FOUND
    return Access.GRANTED


def ensure_access(access: Access, label: str) -> None:
    if access is Access.GRANTED:
        return
    if access is Access.UNAUTHENTICATED:
        raise AuthenticationError()
    if access is Access.FORBIDDEN:
        raise AuthorizationError(f"Forbidden: only artists can manage {label}s")
    raise NotFoundError(f"{label.capitalize()} not found or access denied")


async def load_owned(
    model: Type[Model],
    resource_id: Any,
    principal: Optional[User],
    owner_field: str,
    label: str,
    *,
    using_db: Any = None,
) -> Model:
    """
    Load `model` by id and apply the ownership guard. Returns the resource or raises.
    """
    resource = None
    rid = parse_uuid(resource_id)
    # Role checks come before the lookup so non-artists never touch the table
    pre = check_access(principal, None, owner_field)
    if pre in (Access.UNAUTHENTICATED, Access.FORBIDDEN):
        ensure_access(pre, label)
    if rid is not None:
        qs = model.filter(id=rid)
        if using_db is not None:
            qs = qs.using_db(using_db)
        resource = await qs.first()
    ensure_access(check_access(principal, resource, owner_field), label)
    return resource


def can_view(collection: Model, user: User) -> bool:
    """Read rule for collection content: the creator, or anyone once published and active."""
    if str(collection.created_by_id) == str(user.id):
        return True
    return collection.is_published and collection.is_active
