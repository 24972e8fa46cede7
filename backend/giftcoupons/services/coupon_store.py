"""
SQLAlchemy-backed collaborators for the batch issuer.
"""
from typing import Optional

from sqlalchemy.orm import Session

from giftcoupons.core.db_transaction import safe_commit
from giftcoupons.models.gift_coupon import GiftCoupon
from giftcoupons.models.item import Item
from giftcoupons.services.batch_issuer import (
    CodeRegistry,
    CouponRecord,
    CouponStore,
    ItemDescriptor,
    ItemLookup,
)


class SqlItemLookup(ItemLookup):
    def __init__(self, db: Session):
        self.db = db

    def resolve(self, item_id: int) -> Optional[ItemDescriptor]:
        item = self.db.get(Item, item_id)
        if item is None:
            return None
        return ItemDescriptor(id=item.id, name=item.name, is_purchasable=bool(item.is_active))


class SqlCodeRegistry(CodeRegistry):
    def __init__(self, db: Session):
        self.db = db

    def exists(self, code: str) -> bool:
        return self.db.query(GiftCoupon.id).filter(GiftCoupon.code == code).first() is not None


class SqlCouponStore(CouponStore):
    """Commits each coupon on its own so a failed write leaves earlier coupons in place."""

    def __init__(self, db: Session):
        self.db = db

    def persist(self, record: CouponRecord) -> Optional[int]:
        coupon = GiftCoupon(
            code=record.code,
            description=record.description,
            discount_type=record.discount_type,
            usage_limit=record.usage_limit,
            used_count=0,
            individual_use=record.individual_use,
            expires_at=record.expires_at,
            gift_payload=record.gift_payload,
            is_generated=record.is_generated,
            requested_item_ids=record.requested_item_ids,
            generated_at=record.generated_at,
        )
        self.db.add(coupon)
        if not safe_commit(self.db, f"Saving coupon {record.code}"):
            return None
        return coupon.id
