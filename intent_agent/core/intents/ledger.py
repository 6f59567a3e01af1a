"""Bounded in-memory record of recent intent results."""

from collections import OrderedDict
from typing import Dict, List, Optional

from .models import IntentResult


class IntentLedger:
    """
    Keeps the most recent ``max_size`` results, oldest evicted first.

    An idempotency key maps to the first result recorded under it for as
    long as that result stays in the ledger.
    """

    def __init__(self, max_size: int = 500):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._results: "OrderedDict[str, IntentResult]" = OrderedDict()
        self._by_key: Dict[str, str] = {}
        self._key_for_id: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._results)

    def record(self, result: IntentResult, idempotency_key: Optional[str] = None) -> None:
        self._results[result.id] = result
        if idempotency_key and idempotency_key not in self._by_key:
            self._by_key[idempotency_key] = result.id
            self._key_for_id[result.id] = idempotency_key

        while len(self._results) > self.max_size:
            evicted_id, _ = self._results.popitem(last=False)
            key = self._key_for_id.pop(evicted_id, None)
            if key is not None:
                self._by_key.pop(key, None)

    def get(self, intent_id: str) -> Optional[IntentResult]:
        return self._results.get(intent_id)

    def get_by_key(self, idempotency_key: str) -> Optional[IntentResult]:
        intent_id = self._by_key.get(idempotency_key)
        return self._results.get(intent_id) if intent_id else None

    def recent(self, limit: int = 20) -> List[IntentResult]:
        """Newest first."""
        return list(reversed(self._results.values()))[:limit]
