# app/models/art_object.py
"""
Database model for uploaded 3D objects ("objects" in the API).
"""
import uuid
from tortoise import fields, models

DEFAULT_OBJECT_DESCRIPTION = "No description provided"

class ArtObject(models.Model):
    """
    A 3D model file plus metadata.

    Relationships:
    - Belongs to the uploading User (many-to-one)
    - Referenced by CollectionObject (ordered collection membership) and PlacedObject
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    title = fields.CharField(max_length=35)
    description = fields.CharField(max_length=500, default=DEFAULT_OBJECT_DESCRIPTION)
    uploaded_by = fields.ForeignKeyField(
        "models.User",
        related_name="objects",
        on_delete=fields.CASCADE,
    )
    file = fields.JSONField()  # Asset ref of the .glb model
    thumbnail = fields.JSONField(null=True)  # Optional image asset ref
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "objects"
