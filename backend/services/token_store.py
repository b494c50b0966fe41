"""Short-lived token staging store.

One request stores a token under a caller-chosen correlation key, a later
request reads it back. Records live for a fixed TTL and expired ones are
evicted lazily, on the read that notices them.

The backend is picked once, when the store is built: Supabase when
SUPABASE_URL and SUPABASE_ANON_KEY are set and well-formed, otherwise an
in-process table. "Never stored" and "expired" both come back as None.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from config import Settings
from errors import ConfigurationMissingError, InvalidInputError
from services.expiry import DEFAULT_TTL, TokenRecord, compute_expiry, is_expired, utcnow
from services.memory_backend import InMemoryBackend
from services.supabase_backend import SupabaseBackend

logger = logging.getLogger(__name__)


class TokenBackend(Protocol):
    name: str

    async def upsert(self, record: TokenRecord) -> None: ...

    async def lookup(self, key: str) -> TokenRecord | None: ...

    async def delete(self, key: str) -> None: ...

    async def delete_expired(self, key: str, now: datetime) -> bool: ...

    async def purge_expired(self, now: datetime) -> int: ...

    async def check(self) -> None: ...

    async def aclose(self) -> None: ...


def redact(key: str, length: int = 10) -> str:
    """Short key prefix for log lines."""
    return f"{key[:length]}..." if len(key) > length else key


def select_backend(settings: Settings) -> TokenBackend:
    """Pick the durable backend if it can be configured, else fall back to memory."""
    try:
        backend = SupabaseBackend.from_settings(settings)
    except ConfigurationMissingError as e:
        if settings.require_durable:
            raise
        logger.warning(
            "%s. Falling back to in-memory token storage: tokens are not shared "
            "across instances and are lost on restart.",
            e,
        )
        return InMemoryBackend()
    logger.info("Using Supabase token storage (table=%s)", backend.table)
    return backend


class TokenStore:
    def __init__(
        self,
        backend: TokenBackend,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.backend = backend
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], datetime] = utcnow) -> "TokenStore":
        return cls(
            select_backend(settings),
            ttl=timedelta(seconds=settings.token_ttl_seconds),
            clock=clock,
        )

    @property
    def backend_name(self) -> str:
        return self.backend.name

    async def put(self, key: str, token: str) -> TokenRecord:
        """Stage a token under key, replacing any earlier record for it."""
        if not key or not token:
            raise InvalidInputError()

        created_at = self._clock()
        record = TokenRecord(
            key=key,
            token=token,
            created_at=created_at,
            expires_at=compute_expiry(created_at, self.ttl),
        )
        await self.backend.upsert(record)
        logger.info(
            "Stored token: hash=%s expires at %s",
            redact(key),
            record.expires_at.isoformat(),
        )
        return record

    async def get(self, key: str) -> TokenRecord | None:
        """Return the live record for key, or None if absent or expired."""
        if not key:
            return None

        record = await self.backend.lookup(key)
        if record is None:
            logger.info("Token not found for hash: %s", redact(key, 20))
            return None

        now = self._clock()
        if is_expired(record, now):
            logger.info("Token expired for hash: %s", redact(key, 20))
            # Conditional: a put that landed after the lookup must survive.
            await self.backend.delete_expired(key, now)
            return None

        logger.info("Found token for hash: %s", redact(key, 20))
        return record

    async def purge_expired(self) -> int:
        return await self.backend.purge_expired(self._clock())

    async def check(self) -> None:
        await self.backend.check()

    async def aclose(self) -> None:
        await self.backend.aclose()
