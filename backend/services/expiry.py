"""Token record model and the fixed-TTL expiry policy.

Expiry is only ever evaluated lazily, when a record is read. There is no
background sweep unless services/sweeper.py is wired up explicitly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

DEFAULT_TTL = timedelta(minutes=10)


@dataclass(frozen=True)
class TokenRecord:
    key: str
    token: str
    created_at: datetime
    expires_at: datetime

    def to_row(self) -> dict:
        """Persisted layout: the correlation key is stored in the `hash` column."""
        return {
            "hash": self.key,
            "token": self.token,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "TokenRecord":
        return cls(
            key=row["hash"],
            token=row["token"],
            created_at=_parse_timestamp(row["created_at"]),
            expires_at=_parse_timestamp(row["expires_at"]),
        )


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_expiry(created_at: datetime, ttl: timedelta = DEFAULT_TTL) -> datetime:
    return created_at + ttl


def is_live(created_at: datetime, ttl: timedelta, now: datetime) -> bool:
    """A record is live strictly before created_at + ttl."""
    return now < compute_expiry(created_at, ttl)


def is_expired(record: TokenRecord, now: datetime) -> bool:
    """Runtime check used by the store and backends.

    Reads the stored expires_at, which is compute_expiry(created_at, ttl) at
    write time, so it agrees with is_live for records written under the
    current TTL.
    """
    return not now < record.expires_at
