"""HTTP middleware for origin checks and security headers."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from portfolio_site.domain.errors import CorsRejected

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}

logger = logging.getLogger(__name__)


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject browser requests whose Origin is not on the allow-list.

    Requests without an Origin header (curl, server-to-server) pass through.
    """

    def __init__(self, app: ASGIApp, allowed_origins: list[str]) -> None:
        super().__init__(app)
        self.allowed_origins = set(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        try:
            self.check(origin)
        except CorsRejected as exc:
            logger.warning(
                "Rejected cross-origin request", extra={"origin": exc.origin}
            )
            return JSONResponse(
                status_code=403, content={"ok": False, "message": "CORS not allowed"}
            )
        return await call_next(request)

    def check(self, origin: str | None) -> None:
        """Raise CorsRejected when origin is present and not allowed."""
        if origin is None or "*" in self.allowed_origins:
            return
        if origin.rstrip("/") not in self.allowed_origins:
            raise CorsRejected(origin)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach conservative security headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
