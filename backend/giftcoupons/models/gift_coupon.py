from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
import enum
from giftcoupons.core.database import Base


class DiscountKindEnum(str, enum.Enum):
    FREE_GIFT = "free_gift"          # grants the items in gift_payload
    PERCENT = "percent"
    FIXED_CART = "fixed_cart"
    FIXED_PRODUCT = "fixed_product"


class GiftCoupon(Base):
    __tablename__ = "gift_coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, nullable=False, index=True)  # e.g. GIFT-3FA9C01B7D2E
    description = Column(String(500), nullable=True)
    discount_type = Column(
        SQLEnum(DiscountKindEnum, values_callable=lambda x: [e.value for e in x], native_enum=False),
        nullable=False,
    )
    usage_limit = Column(Integer, nullable=False, default=1)
    used_count = Column(Integer, default=0, nullable=False)
    individual_use = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    gift_payload = Column(JSON, nullable=True)  # {item_id: {item_id, variant_id, quantity}}

    # Batch marker
    is_generated = Column(Boolean, nullable=False, default=False, index=True)
    requested_item_ids = Column(JSON, nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
