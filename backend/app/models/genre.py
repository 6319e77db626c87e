# app/models/genre.py
import re
import uuid
from tortoise import fields, models

# Letters, digits, spaces and hyphens only
GENRE_NAME_RE = re.compile(r"^[a-zA-Z0-9 -]+$")
GENRE_NAME_MAX = 35

class Genre(models.Model):
    """
    Genre taxonomy entry. Names are unique case-insensitively and stored in
    canonical capitalisation (see `canonical_name`).
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=GENRE_NAME_MAX, unique=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "genres"

    @staticmethod
    def canonical_name(raw: str) -> str:
        """
        Capitalise every space- and hyphen-separated segment:
        "rock-n-roll" -> "Rock-N-Roll", "deep  house" -> "Deep  House".
        """
        return " ".join(
            "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))
            for word in raw.split(" ")
        )
