"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TokenRelayError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class InvalidInputError(TokenRelayError):
    def __init__(self, message: str = "Missing hash or token"):
        super().__init__(message, status_code=400)


class ConfigurationMissingError(TokenRelayError):
    def __init__(self, missing: list[str]):
        super().__init__(
            f"Durable token storage not configured: {', '.join(missing)}",
            status_code=500,
        )
        self.missing = missing


class BackendUnavailableError(TokenRelayError):
    """Durable storage call failed. Never used to signal a missing key."""

    def __init__(self, operation: str, detail: str):
        super().__init__(f"Token storage {operation} failed: {detail}", status_code=503)
        self.operation = operation


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(BackendUnavailableError)
    async def handle_backend_unavailable(_request: Request, exc: BackendUnavailableError):
        return JSONResponse(
            {"success": False, "error": "Token storage unavailable", "message": str(exc)},
            status_code=exc.status_code,
        )

    @app.exception_handler(TokenRelayError)
    async def handle_token_relay_error(_request: Request, exc: TokenRelayError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
