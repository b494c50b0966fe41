"""Optional bulk eviction of expired tokens.

Lazy eviction on read never touches records nobody asks for again, so in
Supabase those rows stay around forever. Running this on a timer keeps the
table small. Off by default (TOKEN_SWEEP_ENABLED).
"""

import logging

from services.token_store import TokenStore

logger = logging.getLogger(__name__)


async def sweep_expired(store: TokenStore) -> int:
    removed = await store.purge_expired()
    if removed:
        logger.info("Swept %d expired token(s) from %s storage", removed, store.backend_name)
    return removed
