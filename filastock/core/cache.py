"""Per-owner cache of catalog display names (brand and material type).

Only a read-side convenience for the dashboard: entries expire after a TTL and
every catalog write for an owner drops that owner's entries. Correctness never
depends on a hit.
"""

import logging
import time
from typing import Dict, Hashable, Optional, Tuple

from .config import settings

logger = logging.getLogger(__name__)


class CatalogCache:
    def __init__(self, ttl: float = None, clock=time.monotonic):
        self.ttl = settings.catalog_cache_ttl if ttl is None else ttl
        self._clock = clock
        self._entries: Dict[Tuple[str, str], Tuple[float, dict]] = {}

    def get(self, owner_id: str, kind: str) -> Optional[dict]:
        entry = self._entries.get((owner_id, kind))
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self.ttl:
            self._entries.pop((owner_id, kind), None)
            return None
        return value

    def set(self, owner_id: str, kind: str, value: Dict[Hashable, str]) -> None:
        if self.ttl <= 0:
            return
        self._entries[(owner_id, kind)] = (self._clock(), dict(value))

    def invalidate(self, owner_id: str, kind: str = None) -> None:
        if kind is not None:
            self._entries.pop((owner_id, kind), None)
        else:
            for key in [k for k in self._entries if k[0] == owner_id]:
                del self._entries[key]
        logger.debug("catalog cache invalidated owner=%s kind=%s", owner_id, kind or "*")

    def clear(self) -> None:
        self._entries.clear()


catalog_cache = CatalogCache()
