"""
Generation hooks: fire-and-forget listeners around a batch plus value filters
that let integrators adjust the batch size and the expiry window.

Listeners and filters are isolated from the issuer: an exception raised by one
is logged and skipped.
"""
from typing import Any, Callable, Dict, List, Sequence

from giftcoupons.core.logging_config import get_logger

logger = get_logger("hooks")

BEFORE_BATCH = "before_batch"
COUPON_GENERATED = "coupon_generated"
AFTER_BATCH = "after_batch"

BATCH_SIZE_FILTER = "max_coupons_per_batch"
EXPIRY_DAYS_FILTER = "coupon_expiry_days"


class CouponHooks:
    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = {
            BEFORE_BATCH: [],
            COUPON_GENERATED: [],
            AFTER_BATCH: [],
        }
        self._filters: Dict[str, List[Callable[[Any], Any]]] = {
            BATCH_SIZE_FILTER: [],
            EXPIRY_DAYS_FILTER: [],
        }

    def add_listener(self, event: str, listener: Callable[..., Any]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown event '{event}'")
        self._listeners[event].append(listener)

    def add_filter(self, name: str, fn: Callable[[Any], Any]) -> None:
        if name not in self._filters:
            raise ValueError(f"Unknown filter '{name}'")
        self._filters[name].append(fn)

    def emit(self, event: str, *args: Any) -> None:
        for listener in self._listeners.get(event, []):
            try:
                listener(*args)
            except Exception as e:
                logger.warning(f"Listener for {event} failed: {e}", exc_info=True)

    def apply_filter(self, name: str, value: Any) -> Any:
        for fn in self._filters.get(name, []):
            try:
                value = fn(value)
            except Exception as e:
                logger.warning(f"Filter {name} failed, keeping {value!r}: {e}", exc_info=True)
        return value

    def before_batch(self, item_ids: Sequence[int], count: int) -> None:
        self.emit(BEFORE_BATCH, list(item_ids), count)

    def coupon_generated(self, coupon_id: int, item_ids: Sequence[int]) -> None:
        self.emit(COUPON_GENERATED, coupon_id, list(item_ids))

    def after_batch(self, item_ids: Sequence[int], issued: int) -> None:
        self.emit(AFTER_BATCH, list(item_ids), issued)


def _log_before(item_ids, count):
    logger.info(f"Generating {count} coupons for items {item_ids}")


def _log_after(item_ids, issued):
    logger.info(f"Generated {issued} coupons for items {item_ids}")


def default_hooks() -> CouponHooks:
    """Hooks with the audit-log listeners attached."""
    hooks = CouponHooks()
    hooks.add_listener(BEFORE_BATCH, _log_before)
    hooks.add_listener(AFTER_BATCH, _log_after)
    return hooks
