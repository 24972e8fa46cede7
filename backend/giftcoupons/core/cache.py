"""In-process TTL cache (no Redis). Holds the item picker list and the
per-operator "generation in progress" flags."""
import json
import threading
import time
from typing import Any, Optional, Dict, Tuple

CACHE_PREFIX_ITEMS = "items"
CACHE_PREFIX_GENERATING = "coupon_generating"

_memory: Dict[str, Tuple[float, str]] = {}  # key -> (expires_at, json_value)
_lock = threading.Lock()


def _live(key: str, now: float) -> bool:
    entry = _memory.get(key)
    if entry is None:
        return False
    if now > entry[0]:
        del _memory[key]
        return False
    return True


def cache_get(key: str) -> Optional[Any]:
    with _lock:
        if not _live(key, time.time()):
            return None
        raw = _memory[key][1]
    try:
        return json.loads(raw)
    except ValueError:
        return None


def cache_set(key: str, value: Any, ttl_seconds: int) -> bool:
    try:
        raw = json.dumps(value, default=str)
    except (TypeError, ValueError):
        return False
    with _lock:
        _memory[key] = (time.time() + ttl_seconds, raw)
    return True


def cache_add(key: str, value: Any, ttl_seconds: int) -> bool:
    """Set key only if it is absent or expired. Returns False when a live value exists."""
    raw = json.dumps(value, default=str)
    with _lock:
        now = time.time()
        if _live(key, now):
            return False
        _memory[key] = (now + ttl_seconds, raw)
    return True


def cache_delete(key: str) -> bool:
    with _lock:
        _memory.pop(key, None)
    return True


def cache_delete_pattern(prefix: str) -> bool:
    with _lock:
        to_del = [k for k in _memory if k.startswith(prefix)]
        for k in to_del:
            del _memory[k]
    return True


def cache_clear() -> None:
    with _lock:
        _memory.clear()


def item_picker_cache_key() -> str:
    return f"{CACHE_PREFIX_ITEMS}:picker"


def generation_lock_key(operator_id: str) -> str:
    return f"{CACHE_PREFIX_GENERATING}:{operator_id}"
