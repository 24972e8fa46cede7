"""
Batch issuance of single-use gift coupons.

The issuer owns the generation loop only. Item lookup, the code namespace,
persistence and notifications are collaborators passed to the constructor.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from giftcoupons.core.config import settings
from giftcoupons.core.logging_config import get_logger
from giftcoupons.models.gift_coupon import DiscountKindEnum
from giftcoupons.services.code_generator import generate_coupon_code
from giftcoupons.services.hooks import CouponHooks, BATCH_SIZE_FILTER, EXPIRY_DAYS_FILTER

logger = get_logger("batch_issuer")


@dataclass
class ItemDescriptor:
    id: int
    name: str
    is_purchasable: bool = True
    variant_id: int = 0


@dataclass
class CouponRecord:
    code: str
    description: str
    discount_type: DiscountKindEnum
    expires_at: datetime
    requested_item_ids: List[int]
    generated_at: datetime
    gift_payload: Optional[Dict[str, dict]] = None
    usage_limit: int = field(default=1, init=False)
    individual_use: bool = field(default=True, init=False)
    is_generated: bool = field(default=True, init=False)


class ItemLookup:
    def resolve(self, item_id: int) -> Optional[ItemDescriptor]:
        raise NotImplementedError


class CodeRegistry:
    def exists(self, code: str) -> bool:
        raise NotImplementedError


class CouponStore:
    def persist(self, record: CouponRecord) -> Optional[int]:
        """Store the record and return its id, or None when the write failed."""
        raise NotImplementedError


def parse_discount_kind(value) -> DiscountKindEnum:
    """Exact match against the closed discount enum; anything else is a free gift."""
    if isinstance(value, DiscountKindEnum):
        return value
    try:
        return DiscountKindEnum(value)
    except ValueError:
        logger.warning(f"Unknown discount type {value!r}, using {DiscountKindEnum.FREE_GIFT.value}")
        return DiscountKindEnum.FREE_GIFT


def format_item_names(names: Sequence[str]) -> str:
    """'A', 'A and B', 'A, B and C'."""
    if len(names) > 1:
        return f"{', '.join(names[:-1])} and {names[-1]}"
    return names[0] if names else ""


def build_gift_payload(items: Iterable[ItemDescriptor]) -> Dict[str, dict]:
    return {
        str(item.id): {"item_id": item.id, "variant_id": item.variant_id, "quantity": 1}
        for item in items
    }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BatchIssuer:
    def __init__(
        self,
        lookup: ItemLookup,
        registry: CodeRegistry,
        store: CouponStore,
        hooks: Optional[CouponHooks] = None,
        generator: Callable[[Optional[str]], str] = generate_coupon_code,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.lookup = lookup
        self.registry = registry
        self.store = store
        self.hooks = hooks or CouponHooks()
        self.generator = generator
        self.clock = clock
        self.sleep = sleep

    def resolve_items(self, item_ids: Iterable[int]) -> Dict[int, ItemDescriptor]:
        """Resolve ids in request order; unknown ids and lookup faults are dropped."""
        resolved: Dict[int, ItemDescriptor] = {}
        for item_id in item_ids:
            if item_id in resolved:
                continue
            try:
                item = self.lookup.resolve(item_id)
            except Exception as e:
                logger.warning(f"Item lookup failed for {item_id}: {e}")
                continue
            if item is not None:
                resolved[item_id] = item
        return resolved

    def effective_count(self, count: int) -> int:
        filtered = self.hooks.apply_filter(BATCH_SIZE_FILTER, count)
        if (
            isinstance(filtered, int)
            and not isinstance(filtered, bool)
            and 1 <= filtered <= settings.MAX_COUPONS_PER_BATCH
        ):
            return filtered
        logger.warning(
            f"Batch size filter returned {filtered!r}, outside 1..{settings.MAX_COUPONS_PER_BATCH}; keeping {count}"
        )
        return count

    def expiry_days(self) -> int:
        days = self.hooks.apply_filter(EXPIRY_DAYS_FILTER, settings.COUPON_EXPIRY_DAYS)
        if isinstance(days, (int, float)) and not isinstance(days, bool) and days > 0:
            return days
        logger.warning(f"Expiry filter returned {days!r}; keeping {settings.COUPON_EXPIRY_DAYS} days")
        return settings.COUPON_EXPIRY_DAYS

    def build_record(
        self,
        code: str,
        items: Dict[int, ItemDescriptor],
        item_ids: List[int],
        discount_kind: DiscountKindEnum,
        position: int,
        count: int,
        expiry_days: int,
    ) -> CouponRecord:
        now = self.clock()
        names = [item.name for item in items.values()]
        description = f"Auto-generated coupon for {format_item_names(names)} (Batch {position}/{count})"
        gift_payload = None
        if discount_kind == DiscountKindEnum.FREE_GIFT:
            gift_payload = build_gift_payload(items.values())
        return CouponRecord(
            code=code,
            description=description,
            discount_type=discount_kind,
            expires_at=now + timedelta(days=expiry_days),
            requested_item_ids=list(item_ids),
            generated_at=now,
            gift_payload=gift_payload,
        )

    def issue(
        self,
        item_ids: Sequence[int],
        count: int,
        prefix: Optional[str] = None,
        discount_kind=DiscountKindEnum.FREE_GIFT,
    ) -> int:
        """
        Generate up to ``count`` unique coupons for the given items.

        Returns the number of coupons actually persisted. Collisions and store
        failures are retried, but never more than ``count * 2`` attempts are
        made in total, so a partial result is possible.
        """
        item_ids = list(item_ids)
        items = self.resolve_items(item_ids)
        if not items:
            logger.info(f"No resolvable items in {item_ids}; nothing generated")
            return 0

        kind = parse_discount_kind(discount_kind)
        count = self.effective_count(count)
        expiry_days = self.expiry_days()
        attempt_ceiling = count * 2

        self.hooks.before_batch(item_ids, count)

        issued = 0
        attempts = 0
        while issued < count and attempts < attempt_ceiling:
            attempts += 1
            try:
                code = self.generator(prefix)
                if self.registry.exists(code):
                    continue
                record = self.build_record(code, items, item_ids, kind, issued + 1, count, expiry_days)
                coupon_id = self.store.persist(record)
            except Exception as e:
                if settings.DEBUG:
                    logger.error(f"Error generating coupon: {type(e).__name__}")
                continue
            if coupon_id is None:
                if settings.DEBUG:
                    logger.debug(f"Attempt {attempts}/{attempt_ceiling} did not store a coupon")
                continue

            issued += 1
            self.hooks.coupon_generated(coupon_id, item_ids)

            if issued % settings.BATCH_PACING_INTERVAL == 0:
                self.sleep(settings.BATCH_PACING_SECONDS)

        if issued < count:
            logger.warning(f"Attempt ceiling reached: {issued}/{count} coupons generated in {attempts} attempts")

        self.hooks.after_batch(item_ids, issued)
        return issued
