# app/models/collection.py
"""
Database models for collections (tours / expositions).

A collection is an artist-authored, priced bundle of 3D objects. The ordered
object list is stored in `CollectionObject`; likes and views are user sets
(many-to-many), ratings are one row per (collection, user).
"""
import uuid
from tortoise import fields, models

COLLECTION_TYPES = ("tour", "exposition")
DEFAULT_COLLECTION_DESCRIPTION = "No description"

class Collection(models.Model):
    """
    Collection database model.

    Relationships:
    - Belongs to the creating User (many-to-one)
    - Has many CollectionObject entries (ordered membership of ArtObjects)
    - Many-to-many with Genre, and with User for likes and views
    - Has many CollectionRating, PlacedObject and Purchase rows
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    type = fields.CharField(max_length=16)  # "tour" | "exposition"
    title = fields.CharField(max_length=35)
    description = fields.CharField(max_length=1000, default=DEFAULT_COLLECTION_DESCRIPTION)
    city = fields.CharField(max_length=128)
    price = fields.IntField()  # Token price, integer >= 0
    cover_image = fields.JSONField()  # Asset ref {fileName, filePath, fileType, fileSize}
    created_by = fields.ForeignKeyField(
        "models.User",
        related_name="collections",
        on_delete=fields.CASCADE,
    )
    max_objects = fields.IntField(default=10)
    times_bought = fields.IntField(default=0)
    lat = fields.FloatField(null=True)
    lon = fields.FloatField(null=True)
    is_published = fields.BooleanField(default=False)
    is_active = fields.BooleanField(default=True)

    genres = fields.ManyToManyField(
        "models.Genre", related_name="collections", through="collection_genres"
    )
    likes = fields.ManyToManyField(
        "models.User", related_name="liked_collections", through="collection_likes"
    )
    views = fields.ManyToManyField(
        "models.User", related_name="viewed_collections", through="collection_views"
    )

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "collections"


class CollectionObject(models.Model):
    """Ordered membership of an ArtObject in a Collection."""
    id = fields.IntField(pk=True)
    collection = fields.ForeignKeyField(
        "models.Collection", related_name="entries", on_delete=fields.CASCADE
    )
    object = fields.ForeignKeyField(
        "models.ArtObject", related_name="memberships", on_delete=fields.CASCADE
    )
    position = fields.IntField()

    class Meta:
        table = "collection_objects"
        unique_together = (("collection", "object"),)
        ordering = ["position"]


class CollectionRating(models.Model):
    """One 0-5 rating per (collection, user)."""
    id = fields.IntField(pk=True)
    collection = fields.ForeignKeyField(
        "models.Collection", related_name="ratings", on_delete=fields.CASCADE
    )
    user = fields.ForeignKeyField(
        "models.User", related_name="ratings", on_delete=fields.CASCADE
    )
    rating = fields.IntField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "collection_ratings"
        unique_together = (("collection", "user"),)
