from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from giftcoupons.core.cache import cache_get, cache_set, cache_delete_pattern, item_picker_cache_key, CACHE_PREFIX_ITEMS
from giftcoupons.core.config import settings
from giftcoupons.core.database import get_db
from giftcoupons.core.db_transaction import db_transaction
from giftcoupons.models.item import Item
from giftcoupons.schemas.item import ItemCreate, ItemResponse, ItemOption
from giftcoupons.api.v1.endpoints.coupons import require_admin_api_key

router = APIRouter()


@router.get("/", response_model=List[ItemOption])
def list_item_options(db: Session = Depends(get_db)):
    """Purchasable items for the coupon generator picker, ordered by name."""
    key = item_picker_cache_key()
    cached = cache_get(key)
    if cached is not None:
        return cached

    items = db.query(Item).filter(Item.is_active == True).order_by(Item.name.asc()).limit(1000).all()
    options = [{"id": item.id, "label": f"{item.name} (ID: {item.id})"} for item in items]
    cache_set(key, options, settings.ITEM_PICKER_CACHE_TTL)
    return options


@router.post("/", response_model=ItemResponse, status_code=201)
def create_item(
    item: ItemCreate,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_api_key),
):
    """Add an item to the gift catalogue"""
    db_item = Item(
        name=item.name,
        description=item.description,
        price=item.price,
        is_active=item.is_active,
    )
    with db_transaction(db):
        db.add(db_item)
    db.refresh(db_item)
    cache_delete_pattern(CACHE_PREFIX_ITEMS)
    return db_item
