"""FastAPI application factory."""

import json
import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_site.api.middleware import (
    OriginGuardMiddleware,
    SecurityHeadersMiddleware,
)
from portfolio_site.app_logging import configure_logging
from portfolio_site.config import parse_cors_origins
from portfolio_site.containers import AppContainer
from portfolio_site.domain.errors import ContactValidationError, RateLimited, SendError

MAX_BODY_BYTES = 200 * 1024
RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_origins = parse_cors_origins(container.settings.cors_origins)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Contact backend starting",
            extra={"environment": container.settings.environment},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(OriginGuardMiddleware, allowed_origins=allowed_origins)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(RateLimited)
    async def rate_limited(_request: Request, exc: RateLimited) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"ok": False, "message": RATE_LIMIT_MESSAGE},
            headers={"Retry-After": str(max(1, math.ceil(exc.retry_after)))},
        )

    @app.exception_handler(ContactValidationError)
    async def invalid_contact(
        _request: Request, exc: ContactValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "errors": [error.as_dict() for error in exc.errors]},
        )

    @app.exception_handler(SendError)
    async def send_failed(_request: Request, _exc: SendError) -> JSONResponse:
        return JSONResponse(
            status_code=500, content={"ok": False, "message": "Failed to send email"}
        )

    @app.get("/api/health")
    async def health(request: Request) -> dict[str, object]:
        """Simple health check endpoint."""
        state_container: AppContainer = request.app.state.container
        return {"ok": True, "env": state_container.settings.environment}

    @app.post("/api/contact", response_model=None)
    async def contact(request: Request) -> dict[str, object] | JSONResponse:
        """Relay a contact form submission by email."""
        state_container: AppContainer = request.app.state.container
        body = await _read_limited_body(request, MAX_BODY_BYTES)
        if body is None:
            return JSONResponse(
                status_code=413, content={"ok": False, "message": "Payload too large"}
            )
        receipt = await state_container.contact_service.submit(
            _client_identity(request), _parse_json(body)
        )
        return {"ok": receipt.ok, "message": receipt.message}

    return app


def _client_identity(request: Request) -> str:
    """Identify the caller by source address."""
    if request.client is None:
        return "unknown"
    return request.client.host


async def _read_limited_body(request: Request, limit: int) -> bytes | None:
    """Read the request body, or return None once it exceeds limit bytes.

    A declared Content-Length over the limit is rejected without reading.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        return None
    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


def _parse_json(body: bytes) -> object:
    """Decode a JSON body; anything unreadable counts as an empty submission."""
    if not body:
        return {}
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}
