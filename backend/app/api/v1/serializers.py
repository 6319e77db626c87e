"""
Model -> JSON dict conversion shared by the routers.
Keys are camelCase, ids are strings, datetimes are ISO strings.
"""
import datetime as dt
from typing import List, Optional

from app.models import ArtObject, Collection, Genre, PlacedObject, Purchase, User
from app.services.collections import collection_stats, object_counts


def iso(value: Optional[dt.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_public(u: User) -> dict:
    return {"id": str(u.id), "username": u.username, "profilePicture": u.profile_picture}


def user_private(u: User) -> dict:
    return {
        "id": str(u.id),
        "firstName": u.first_name,
        "lastName": u.last_name,
        "username": u.username,
        "email": u.email,
        "isArtist": u.is_artist,
        "profilePicture": u.profile_picture,
        "tokens": u.tokens,
        "createdAt": iso(u.created_at),
    }


def genre_to_dict(g: Genre) -> dict:
    return {"id": str(g.id), "name": g.name}


def object_to_dict(o: ArtObject) -> dict:
    return {
        "id": str(o.id),
        "title": o.title,
        "description": o.description,
        "uploadedBy": str(o.uploaded_by_id),
        "file": o.file,
        "thumbnail": o.thumbnail,
        "createdAt": iso(o.created_at),
        "updatedAt": iso(o.updated_at),
    }


def location_of(c: Collection) -> Optional[dict]:
    if c.lat is None and c.lon is None:
        return None
    return {"lat": c.lat, "lon": c.lon}


def collection_summary(c: Collection) -> dict:
    """Projection used for artist listings and as the base of every other view."""
    return {
        "id": str(c.id),
        "type": c.type,
        "title": c.title,
        "city": c.city,
        "price": c.price,
        "coverImage": c.cover_image,
        "createdBy": str(c.created_by_id),
        "isPublished": c.is_published,
        "isActive": c.is_active,
        "location": location_of(c),
        "createdAt": iso(c.created_at),
    }


def collection_public(c: Collection, viewer: Optional[User] = None) -> dict:
    """Discovery card. Expects `created_by`, `likes`, `views`, `ratings` prefetched."""
    data = collection_summary(c)
    data["createdBy"] = {"id": str(c.created_by.id), "username": c.created_by.username}
    data.update(collection_stats(c, viewer))
    return data


def placed_to_dict(p: PlacedObject, with_object: bool = False) -> dict:
    data = {
        "id": str(p.id),
        "collectionId": str(p.collection_id),
        "objectId": str(p.object_id),
        "position": p.position,
        "scale": p.scale,
        "rotation": p.rotation,
        "deviceHeading": p.device_heading,
        "origin": p.origin,
        "createdAt": iso(p.created_at),
        "updatedAt": iso(p.updated_at),
    }
    if with_object:
        data["object"] = object_to_dict(p.object)
    return data


def purchase_to_dict(p: Purchase, now: dt.datetime, collection: Optional[dict] = None) -> dict:
    data = {
        "id": str(p.id),
        "userId": str(p.user_id),
        "collectionId": str(p.collection_id),
        "price": p.price,
        "paymentStatus": p.payment_status,
        "purchasedAt": iso(p.purchased_at),
        "expiresAt": iso(p.expires_at),
        "isActive": p.is_current(now),
    }
    if collection is not None:
        data["collection"] = collection
    return data


def collection_detail(c: Collection, objects: List[ArtObject], viewer: Optional[User] = None) -> dict:
    """
    Fully expanded collection. Expects `created_by`, `genres`, `likes`, `views`
    and `ratings` fetched; `objects` is the ordered member list.
    """
    data = collection_summary(c)
    data.update(
        {
            "description": c.description,
            "createdBy": user_public(c.created_by),
            "objects": [object_to_dict(o) for o in objects],
            "objectsCount": len(objects),
            "maxObjects": c.max_objects,
            "timesBought": c.times_bought,
            "genres": [genre_to_dict(g) for g in c.genres],
            "likes": [str(u.id) for u in c.likes],
            "views": [str(u.id) for u in c.views],
            "ratings": [{"user": str(r.user_id), "rating": r.rating} for r in c.ratings],
            "updatedAt": iso(c.updated_at),
        }
    )
    data.update(collection_stats(c, viewer))
    return data


async def public_cards(collections: List[Collection], viewer: Optional[User] = None) -> List[dict]:
    """Discovery cards with `objectsCount`; same prefetch expectations as `collection_public`."""
    counts = await object_counts([c.id for c in collections])
    cards = []
    for c in collections:
        card = collection_public(c, viewer)
        card["objectsCount"] = counts.get(str(c.id), 0)
        cards.append(card)
    return cards
