# app/schemas/placed_object.py
"""
Pydantic schemas for AR placements.
"""
from typing import Optional
from pydantic import BaseModel

class Vector3(BaseModel):
    x: float
    y: float
    z: float

class GeoPosition(Vector3):
    """World position: geographic anchor plus local offset in metres."""
    lat: float
    lon: float

class Origin(BaseModel):
    """Device pose the placement was authored from."""
    lat: float
    lon: float
    heading: float

class PlacedObjectIn(BaseModel):
    """
    Upsert payload. `placedObjectId` is the client-side id of the placement:
    when it names an existing placement of the collection it is updated,
    otherwise a new placement is created (using that id when it is a UUID).
    """
    placedObjectId: Optional[str] = None
    collectionId: str
    objectId: str
    position: GeoPosition
    scale: Vector3
    rotation: Vector3
    deviceHeading: float
    origin: Origin
