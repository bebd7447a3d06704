# In-memory, most-recent-first history of finished generations.
# Nothing is persisted; a restart starts empty.

from __future__ import annotations

import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .types import GenerationConfig, GenerationResult


@dataclass
class HistoryItem:
    config: GenerationConfig
    result: GenerationResult
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "config": self.config.to_dict(),
            "result": self.result.to_dict(),
        }


class GenerationHistory:
    def __init__(self, limit: int = 20):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._items: deque[HistoryItem] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def add(self, config: GenerationConfig, result: GenerationResult) -> HistoryItem:
        item = HistoryItem(config=config, result=result.copy())
        with self._lock:
            self._items.appendleft(item)
        return item

    def list(self) -> List[HistoryItem]:
        with self._lock:
            return list(self._items)

    def get(self, item_id: str) -> Optional[HistoryItem]:
        with self._lock:
            return next((i for i in self._items if i.id == item_id), None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
