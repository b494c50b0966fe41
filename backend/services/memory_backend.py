"""In-process token storage. Fallback when Supabase isn't configured.

Note: Each worker process has its own table. With more than one worker (or
more than one Functions instance) a token stored by one instance can't be
read by another, and everything is lost on restart. Fine for local dev,
degraded in production.
"""

import threading
from datetime import datetime

from services.expiry import TokenRecord, is_expired


class InMemoryBackend:
    name = "memory"

    def __init__(self):
        self._records: dict[str, TokenRecord] = {}
        # Guards every access to _records. Never held across an await.
        self._lock = threading.Lock()

    async def upsert(self, record: TokenRecord) -> None:
        with self._lock:
            self._records[record.key] = record

    async def lookup(self, key: str) -> TokenRecord | None:
        with self._lock:
            return self._records.get(key)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    async def delete_expired(self, key: str, now: datetime) -> bool:
        """Delete key only if the stored record is still expired at now."""
        with self._lock:
            record = self._records.get(key)
            if record is None or not is_expired(record, now):
                return False
            del self._records[key]
        return True

    async def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [key for key, record in self._records.items() if is_expired(record, now)]
            for key in expired:
                del self._records[key]
        return len(expired)

    async def check(self) -> None:
        return None

    async def aclose(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
