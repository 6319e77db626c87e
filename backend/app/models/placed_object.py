# app/models/placed_object.py
import uuid
from tortoise import fields, models

class PlacedObject(models.Model):
    """
    AR-space transform of one object instance inside one collection.

    Transform parts are stored as JSON and validated by the request schemas:
    - position: {lat, lon, x, y, z}
    - scale / rotation: {x, y, z}
    - origin: {lat, lon, heading} (device pose the placement was authored from)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # May be supplied by the client (upsert key)
    collection = fields.ForeignKeyField(
        "models.Collection", related_name="placed_objects", on_delete=fields.CASCADE
    )
    object = fields.ForeignKeyField(
        "models.ArtObject", related_name="placements", on_delete=fields.CASCADE
    )
    position = fields.JSONField()
    scale = fields.JSONField()
    rotation = fields.JSONField()
    device_heading = fields.FloatField()
    origin = fields.JSONField()
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "placed_objects"
