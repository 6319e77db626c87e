# app/schemas/collection.py
"""
Pydantic schemas for collection endpoints.

Create/update payloads arrive as a JSON string in the `collection` multipart
field; field-level rules (lengths, allowed types, price) are enforced by the
router so the error messages stay uniform across endpoints.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field

class LocationIn(BaseModel):
    """Optional geolocation of a tour or exposition."""
    lat: float
    lon: float

class CollectionIn(BaseModel):
    """
    Request model for creating or updating a collection.
    """
    type: Optional[str] = None  # "tour" | "exposition" (case-insensitive)
    title: Optional[str] = None
    description: Optional[str] = None  # Defaults to "No description" when blank
    city: Optional[str] = None
    price: Any = None  # Non-negative integer, checked by the router
    genres: Optional[List[str]] = None  # Genre ids; on update, [] clears the set
    location: Optional[LocationIn] = None

class ObjectIdsIn(BaseModel):
    """Body of add-objects / replace-objects."""
    objectIds: List[str] = Field(default_factory=list)

class RatingIn(BaseModel):
    rating: Optional[int] = None  # 0..5
