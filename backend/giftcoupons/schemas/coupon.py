from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from giftcoupons.models.gift_coupon import DiscountKindEnum


class CouponBatchRequest(BaseModel):
    item_ids: List[int] = []
    number_of_coupons: Optional[int] = None
    coupon_prefix: Optional[str] = None
    discount_type: str = DiscountKindEnum.FREE_GIFT.value

    @field_validator("item_ids")
    @classmethod
    def drop_empty_ids(cls, v: List[int]) -> List[int]:
        # Unselected picker rows arrive as 0
        return [i for i in v if i] if v else []

    @field_validator("discount_type")
    @classmethod
    def discount_type_strip(cls, v: str) -> str:
        return v.strip() if v else DiscountKindEnum.FREE_GIFT.value


class CouponBatchResponse(BaseModel):
    success: bool
    message: str
    generated: int
    requested: int


class GiftCouponResponse(BaseModel):
    id: int
    code: str
    description: Optional[str]
    discount_type: DiscountKindEnum
    usage_limit: int
    used_count: int
    individual_use: bool
    expires_at: Optional[datetime]
    gift_payload: Optional[Dict[str, Any]] = None
    is_generated: bool
    requested_item_ids: Optional[List[int]] = None
    generated_at: Optional[datetime]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
