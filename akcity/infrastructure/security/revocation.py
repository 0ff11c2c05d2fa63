from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict

from ...domain.clock import ensure_utc, utcnow


class InMemoryTokenRevocationStore:
    """Process-local token denylist. Entries drop out once the token has expired."""

    def __init__(self) -> None:
        self._entries: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._entries[token_id] = ensure_utc(expires_at)
            self._purge_locked()

    def is_revoked(self, token_id: str) -> bool:
        with self._lock:
            self._purge_locked()
            return token_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            self._purge_locked()
            return len(self._entries)

    def _purge_locked(self) -> None:
        now = utcnow()
        expired = [key for key, expires_at in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
