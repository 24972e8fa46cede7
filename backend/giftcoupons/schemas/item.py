from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ItemCreate(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    is_active: bool = True


class ItemResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ItemOption(BaseModel):
    id: int
    label: str  # "Name (ID: 12)"
