"""Token handoff routes.

POST /store-token        → stage {hash, token} for a later request
GET  /temp-token/{hash}  → read back a staged token before it expires
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from errors import InvalidInputError
from services.token_store import TokenStore

logger = logging.getLogger(__name__)

router = APIRouter()


class StoreTokenRequest(BaseModel):
    # Optional so missing or null fields reach the store's own validation (400).
    hash: str | None = None
    token: str | None = None


def get_token_store(request: Request) -> TokenStore:
    """The store is built once per app and shared by every request."""
    return request.app.state.token_store


@router.post("/store-token")
async def store_token(body: StoreTokenRequest, store: TokenStore = Depends(get_token_store)) -> dict:
    """Stage a token under the caller's correlation hash."""
    await store.put(body.hash, body.token)
    return {
        "success": True,
        "message": "Token stored",
        "hash": body.hash,
    }


@router.get("/temp-token/{token_hash:path}")
async def temp_token(token_hash: str, store: TokenStore = Depends(get_token_store)):
    """Return a staged token. Unknown and expired hashes are both a 404."""
    if not token_hash:
        raise InvalidInputError("Missing hash")

    record = await store.get(token_hash)
    if record is None:
        return JSONResponse(
            {"success": False, "error": "Token not found or expired"},
            status_code=404,
        )

    return {
        "success": True,
        "token": record.token,
        "expires_at": record.expires_at.isoformat(),
    }
