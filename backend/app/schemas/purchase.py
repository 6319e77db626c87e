# app/schemas/purchase.py
from typing import Optional
from pydantic import BaseModel

class PurchaseIn(BaseModel):
    collectionId: Optional[str] = None
