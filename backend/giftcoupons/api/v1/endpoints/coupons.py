"""
Bulk gift coupon generation (admin API). Call with header:
X-Admin-API-Key: <your ADMIN_API_KEY from .env>
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status, Header
from sqlalchemy.orm import Session

from giftcoupons.core.cache import cache_add, cache_delete, generation_lock_key
from giftcoupons.core.config import settings
from giftcoupons.core.database import get_db
from giftcoupons.core.logging_config import get_logger
from giftcoupons.models.gift_coupon import GiftCoupon
from giftcoupons.schemas.coupon import CouponBatchRequest, CouponBatchResponse, GiftCouponResponse
from giftcoupons.services.batch_issuer import BatchIssuer
from giftcoupons.services.coupon_store import SqlCodeRegistry, SqlCouponStore, SqlItemLookup
from giftcoupons.services.hooks import default_hooks

logger = get_logger("coupons")

router = APIRouter()


def require_admin_api_key(x_admin_api_key: str | None = Header(None, alias="X-Admin-API-Key")) -> None:
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API key is not configured. Set ADMIN_API_KEY in environment.",
        )
    if x_admin_api_key != settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Admin-API-Key header.",
        )


def get_batch_issuer(db: Session = Depends(get_db)) -> BatchIssuer:
    return BatchIssuer(
        lookup=SqlItemLookup(db),
        registry=SqlCodeRegistry(db),
        store=SqlCouponStore(db),
        hooks=default_hooks(),
    )


@router.post("/admin/generate", response_model=CouponBatchResponse)
def generate_coupon_batch(
    body: CouponBatchRequest,
    x_operator_id: str | None = Header(None, alias="X-Operator-Id"),
    issuer: BatchIssuer = Depends(get_batch_issuer),
    _: None = Depends(require_admin_api_key),
):
    """
    Generate a batch of single-use coupons for the selected items.

    Example body:
      { "item_ids": [12, 15], "number_of_coupons": 10, "coupon_prefix": "GIFT", "discount_type": "free_gift" }
    """
    if not body.item_ids or not body.number_of_coupons:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select at least one product and specify the number of coupons to generate.",
        )
    if any(item_id < 0 for item_id in body.item_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid product selection. Please try again.",
        )
    count = body.number_of_coupons
    if count < 1 or count > settings.MAX_COUPONS_PER_BATCH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum number of coupons that can be generated at once is {settings.MAX_COUPONS_PER_BATCH}.",
        )

    lock_key = generation_lock_key(x_operator_id or "admin")
    if not cache_add(lock_key, True, settings.GENERATION_LOCK_TTL_SECONDS):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Coupon generation already in progress. Please wait before starting another batch.",
        )
    try:
        generated = issuer.issue(body.item_ids, count, body.coupon_prefix, body.discount_type)
    finally:
        cache_delete(lock_key)

    if generated > 0:
        return CouponBatchResponse(
            success=True,
            message=f"Successfully generated {generated} coupons.",
            generated=generated,
            requested=count,
        )
    return CouponBatchResponse(
        success=False,
        message="Failed to generate coupons. Please try again.",
        generated=0,
        requested=count,
    )


@router.get("/admin/generated", response_model=List[GiftCouponResponse])
def list_generated_coupons(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_api_key),
):
    """Machine-generated coupons, newest first."""
    query = db.query(GiftCoupon).filter(GiftCoupon.is_generated == True).order_by(GiftCoupon.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


@router.get("/admin/{code}", response_model=GiftCouponResponse)
def get_coupon(
    code: str,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin_api_key),
):
    coupon = db.query(GiftCoupon).filter(GiftCoupon.code == code.strip().upper()).first()
    if not coupon:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coupon not found")
    return coupon
