import datetime as dt
import logging

from fastapi import APIRouter, Depends
from tortoise.expressions import F
from tortoise.transactions import in_transaction

from app.api.v1.deps import get_current_user, parse_uuid
from app.api.v1.serializers import collection_summary, purchase_to_dict
from app.config import settings
from app.core.errors import ConflictError, EmptyResultError, NotFoundError, ValidationError
from app.core.responses import created, envelope
from app.models import Collection, Purchase, User
from app.schemas.purchase import PurchaseIn

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/purchases", tags=["purchases"])

@router.post("")
async def purchase_collection(body: PurchaseIn, user: User = Depends(get_current_user)):
    """
    Buy time-limited access to a collection with tokens.

    Runs as one database transaction:
    1. load the collection (404)
    2. lock the buyer row, then reject when the caller already holds an unexpired purchase (409)
    3. debit the price with a single conditional UPDATE (tokens >= price), so
       the balance can never go negative even under concurrent purchases (400)
    4. store the purchase with the price at this moment and bump `timesBought`

    Returns the purchase and the remaining balance.
    """
    if not body.collectionId:
        raise ValidationError("Collection ID is required")
    cid = parse_uuid(body.collectionId)
    now = dt.datetime.now(dt.timezone.utc)

    async with in_transaction() as conn:
        collection = await Collection.filter(id=cid).using_db(conn).first() if cid else None
        if not collection:
            raise NotFoundError("Collection not found")

        # Row lock on the buyer: concurrent purchases by the same user queue here
        await User.filter(id=user.id).using_db(conn).select_for_update().first()
        held = await Purchase.filter(
            user_id=user.id, collection_id=collection.id, is_active=True
        ).using_db(conn)
        if any(p.is_current(now) for p in held):
            raise ConflictError("You already own this collection")

        price = collection.price
        debited = (
            await User.filter(id=user.id, tokens__gte=price)
            .using_db(conn)
            .update(tokens=F("tokens") - price)
        )
        if not debited:
            raise ValidationError("Insufficient tokens")

        purchase = await Purchase.create(
            user_id=user.id,
            collection_id=collection.id,
            price=price,
            payment_status="completed",
            purchased_at=now,
            expires_at=now + dt.timedelta(days=settings.purchase_valid_days),
            is_active=True,
            using_db=conn,
        )
        await Collection.filter(id=collection.id).using_db(conn).update(
            times_bought=F("times_bought") + 1
        )
        await user.refresh_from_db(fields=["tokens"], using_db=conn)

    logger.info("[purchases] %s bought collection %s for %d tokens", user.id, collection.id, price)
    return created(
        {"purchase": purchase_to_dict(purchase, now), "tokensLeft": user.tokens},
        message="Collection purchased successfully",
    )

@router.get("")
async def my_purchases(user: User = Depends(get_current_user)):
    """The caller's purchases, newest first, each with a collection summary."""
    rows = (
        await Purchase.filter(user_id=user.id)
        .order_by("-purchased_at")
        .prefetch_related("collection")
    )
    if not rows:
        raise EmptyResultError("No purchases found")
    now = dt.datetime.now(dt.timezone.utc)
    return envelope(
        {"purchases": [purchase_to_dict(p, now, collection_summary(p.collection)) for p in rows]}
    )
