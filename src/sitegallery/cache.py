"""In-process TTL cache shared by every read operation of the gallery service.

Entries live for a fixed time-to-live measured from the ``set`` call. Expired
entries are evicted lazily on the next ``get`` for their key; there is no
background sweep, no capacity bound and no invalidation API. The cache is
process-local and is not locked: it relies on the single-threaded asyncio
event loop to serialise access.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_TTL_SECONDS = 60.0


@dataclass(slots=True)
class CacheEntry:
    data: Any
    expiry: float  # Absolute clock reading; entry is valid while now < expiry


class TTLCache:
    """Expiring key → value store implementing CacheProtocol."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when absent or expired.

        An expired entry is deleted as a side effect of the lookup.
        """
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expiry:
            return entry.data
        self._entries.pop(key, None)
        return None

    def set(self, key: str, data: Any) -> None:
        """(Re)create the entry for ``key`` with a fresh expiry."""
        self._entries[key] = CacheEntry(data=data, expiry=self._clock() + self._ttl)

    def __len__(self) -> int:
        return len(self._entries)
