from collections import deque
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Any

from dealdesk.domain.ports import DealRepository

DEFAULT_MAX_ITEMS = 500


class InMemoryDealRepository(DealRepository):
    """Keeps the newest max_items analyses; older ones are evicted first."""

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS) -> None:
        if max_items <= 0:
            raise ValueError("max_items must be > 0")
        self._items: deque[dict[str, Any]] = deque(maxlen=max_items)
        self._ids = count(1)
        self._lock = Lock()

    def save_analysis(
        self,
        analysis: dict[str, Any],
        payload: dict[str, Any] | None = None,
    ) -> int | None:
        rec = analysis.copy()
        if payload is not None:
            rec["request_payload"] = payload
        with self._lock:
            deal_id = next(self._ids)
            rec["deal_id"] = deal_id
            rec["ts"] = datetime.now(timezone.utc).isoformat()
            self._items.append(rec)
        return deal_id

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        with self._lock:
            return list(reversed(self._items))[:limit]

    def all(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._items)
