# app/schemas/art_object.py
"""
Pydantic schemas for object (3D asset) endpoints.
"""
from typing import Optional
from pydantic import BaseModel

class ObjectIn(BaseModel):
    """
    Metadata of an uploaded object. Sent as the `object` multipart field on
    create and as a JSON body on update; only provided fields change on update.
    """
    title: Optional[str] = None  # 1..35 characters
    description: Optional[str] = None  # Up to 500 characters
