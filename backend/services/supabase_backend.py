"""Supabase token storage via the PostgREST API.

Table layout (one row per correlation key):

    hash        text primary key / unique
    token       text
    created_at  timestamptz
    expires_at  timestamptz

Upserts resolve conflicts on `hash` (replace, no merge). Every transport
error, non-2xx response, or malformed row is raised as
BackendUnavailableError; an empty result set is the only "not found".
"""

import logging
from datetime import datetime
from urllib.parse import urlparse

import httpx

from config import Settings
from errors import BackendUnavailableError, ConfigurationMissingError
from services.expiry import TokenRecord

logger = logging.getLogger(__name__)

_COLUMNS = "hash,token,created_at,expires_at"


class SupabaseBackend:
    name = "supabase"

    def __init__(
        self,
        url: str | None,
        api_key: str | None,
        table: str = "oauth_tokens",
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        missing = []
        if not url or not _is_http_url(url):
            missing.append("SUPABASE_URL")
        if not api_key or not api_key.strip():
            missing.append("SUPABASE_ANON_KEY")
        if missing:
            raise ConfigurationMissingError(missing)

        self.table = table
        # The client timeout stands in for the request deadline; no retries on top.
        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "SupabaseBackend":
        return cls(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.supabase_table,
            timeout=settings.supabase_timeout_seconds,
            **kwargs,
        )

    async def _request(self, operation: str, method: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._client.request(method, f"/{self.table}", **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Supabase %s returned %s: %s", operation, e.response.status_code, e.response.text)
            raise BackendUnavailableError(operation, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Supabase %s failed: %s", operation, e)
            raise BackendUnavailableError(operation, str(e) or type(e).__name__) from e
        return resp

    async def upsert(self, record: TokenRecord) -> None:
        await self._request(
            "upsert",
            "POST",
            params={"on_conflict": "hash"},
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            json=record.to_row(),
        )

    async def lookup(self, key: str) -> TokenRecord | None:
        resp = await self._request(
            "lookup",
            "GET",
            params={"hash": f"eq.{key}", "select": _COLUMNS, "limit": "1"},
        )
        try:
            rows = resp.json()
            if not rows:
                return None
            return TokenRecord.from_row(rows[0])
        except (ValueError, KeyError, TypeError, IndexError) as e:
            logger.error("Supabase lookup returned malformed data: %s", e)
            raise BackendUnavailableError("lookup", f"malformed response: {e}") from e

    async def delete(self, key: str) -> None:
        await self._request("delete", "DELETE", params={"hash": f"eq.{key}"})

    async def delete_expired(self, key: str, now: datetime) -> bool:
        """Delete key only if its row is still expired, so a newer upsert survives."""
        resp = await self._request(
            "delete",
            "DELETE",
            params={"hash": f"eq.{key}", "expires_at": f"lte.{now.isoformat()}", "select": "hash"},
            headers={"Prefer": "return=representation"},
        )
        try:
            return bool(resp.json())
        except (ValueError, TypeError) as e:
            raise BackendUnavailableError("delete", f"malformed response: {e}") from e

    async def purge_expired(self, now: datetime) -> int:
        resp = await self._request(
            "purge",
            "DELETE",
            params={"expires_at": f"lt.{now.isoformat()}", "select": "hash"},
            headers={"Prefer": "return=representation"},
        )
        try:
            return len(resp.json())
        except (ValueError, TypeError) as e:
            raise BackendUnavailableError("purge", f"malformed response: {e}") from e

    async def check(self) -> None:
        """Cheap round trip used by the deep health check."""
        await self._request("check", "GET", params={"select": "hash", "limit": "1"})

    async def aclose(self) -> None:
        await self._client.aclose()


def _is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
