# app/models/user.py
"""
Database model for users.
Represents an account on the platform: buyers and artists share one table,
artists are flagged with `is_artist`.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Collections (as creator, related_name="collections")
    - Has many ArtObjects (as uploader, related_name="objects")
    - Has many Purchases (related_name="purchases")

    Security:
    - Password is stored as an argon2 hash (never store plain text passwords)
    - Username and email must be unique across all users
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    first_name = fields.CharField(max_length=128)
    last_name = fields.CharField(max_length=128)
    username = fields.CharField(max_length=64, unique=True, index=True)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)
    is_artist = fields.BooleanField(default=False)
    profile_picture = fields.JSONField(null=True)  # Asset ref {fileName, filePath, fileType, fileSize}
    tokens = fields.IntField(default=0)  # Spendable balance, never negative
    password_changed_at = fields.DatetimeField(null=True)  # Tokens issued earlier are rejected
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
