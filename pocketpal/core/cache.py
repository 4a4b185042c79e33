# pocketpal/core/cache.py
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Small key/value cache with a time-to-live.

    ``get`` only returns fresh entries; ``peek`` returns whatever is stored
    regardless of age, for stale-on-error fallbacks. The clock is injectable so
    expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at < self.ttl_seconds:
            return value
        return None

    def peek(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        return entry[0] if entry else None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def clear(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
