from fastapi import APIRouter, Depends
from pydantic import BaseModel
from tortoise.expressions import F

from app.api.v1.deps import get_current_user
from app.core.errors import NotFoundError, ValidationError
from app.core.responses import envelope
from app.models.user import User

router = APIRouter(prefix="/tokens", tags=["tokens"])

class TopUpIn(BaseModel):
    tokenAmount: int | None = None

@router.put("")
async def top_up(body: TopUpIn, user: User = Depends(get_current_user)):
    """
    Add tokens to the logged-in user's balance.

    The increment is a single atomic UPDATE, so concurrent top-ups and
    purchases never overwrite each other.

    Errors:
        - 400: amount missing or not a positive integer
    """
    if body.tokenAmount is None:
        raise ValidationError("Token amount is required")
    if body.tokenAmount <= 0:
        raise ValidationError("Token amount must be a positive number")

    updated = await User.filter(id=user.id).update(tokens=F("tokens") + body.tokenAmount)
    if not updated:
        raise NotFoundError("User not found")
    await user.refresh_from_db(fields=["tokens"])
    return envelope({"tokens": user.tokens}, message="User tokens updated successfully")
