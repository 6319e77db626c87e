# app/models/purchase.py
import uuid
import datetime as dt
from tortoise import fields, models

class Purchase(models.Model):
    """
    Token-debited entitlement to a collection for a bounded period.

    - price: snapshot of the collection price at purchase time (never follows later price edits)
    - payment_status: "pending" | "completed"
    - expires_at: purchased_at + PURCHASE_VALID_DAYS
    - is_active: false once revoked; expiry is evaluated against expires_at
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="purchases", on_delete=fields.CASCADE)
    collection = fields.ForeignKeyField(
        "models.Collection", related_name="purchases", on_delete=fields.CASCADE
    )
    price = fields.IntField()
    payment_status = fields.CharField(max_length=16, default="pending")
    purchased_at = fields.DatetimeField()
    expires_at = fields.DatetimeField()
    is_active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "purchases"
        ordering = ["-purchased_at"]

    def is_current(self, now: dt.datetime) -> bool:
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=dt.timezone.utc)
        return self.is_active and expires_at > now
