"""
Coupon code generation: optional sanitised prefix plus a random hex suffix.
"""
import re
import secrets
from typing import Optional

from giftcoupons.core.config import settings

SUFFIX_BYTES = 6  # 12 hex characters
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def normalize_prefix(prefix: Optional[str]) -> str:
    """Strip non-alphanumerics, uppercase and truncate. Returns "" for no prefix."""
    if not prefix:
        return ""
    cleaned = _NON_ALNUM.sub("", prefix)
    return cleaned[:settings.COUPON_PREFIX_MAX_LENGTH].upper()


def generate_coupon_code(prefix: Optional[str] = None) -> str:
    """
    Return a candidate code such as ``GIFT-3FA9C01B7D2E`` (or ``3FA9C01B7D2E``
    without a prefix). Not guaranteed unique; callers check the namespace.
    """
    suffix = secrets.token_hex(SUFFIX_BYTES).upper()
    normalized = normalize_prefix(prefix)
    if normalized:
        return f"{normalized}-{suffix}"
    return suffix
