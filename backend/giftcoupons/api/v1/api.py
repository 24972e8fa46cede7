from fastapi import APIRouter
from giftcoupons.api.v1.endpoints import (
    items,
    coupons,
)

api_router = APIRouter()
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(coupons.router, prefix="/coupons", tags=["coupons"])
