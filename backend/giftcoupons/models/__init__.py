from giftcoupons.models.item import Item
from giftcoupons.models.gift_coupon import GiftCoupon, DiscountKindEnum

__all__ = [
    "Item",
    "GiftCoupon",
    "DiscountKindEnum",
]
