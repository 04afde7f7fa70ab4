"""Origin policy for browser clients.

Origins are allowed by exact match against an allow-list or by a single
pattern for the mobile dev client on a private network. Requests without
an Origin header (curl, native apps) are always allowed.

`OriginPolicyMiddleware` is Starlette's CORS middleware with the policy
enforced up front: a request from a rejected origin gets the 403 payload
before routing or body parsing, preflight or not.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from recipe_favorites.errors import ForbiddenOrigin

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]


@dataclass(frozen=True)
class OriginPolicy:
    """Which request origins may call the API."""

    allowed_origins: tuple[str, ...]
    allowed_pattern: str | None = None

    def is_allowed(self, origin: str | None) -> bool:
        """Check an Origin header value. None means no header was sent."""
        if not origin:
            return True
        if origin in self.allowed_origins:
            return True
        if self.allowed_pattern is not None:
            return re.fullmatch(self.allowed_pattern, origin) is not None
        return False

    def response_headers(self, origin: str | None) -> dict[str, str]:
        """CORS headers for a response built outside the middleware."""
        if not origin or not self.is_allowed(origin):
            return {}
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        }


class OriginPolicyMiddleware(CORSMiddleware):
    """CORS middleware driven by an OriginPolicy."""

    def __init__(self, app: ASGIApp, policy: OriginPolicy):
        super().__init__(
            app,
            allow_origins=list(policy.allowed_origins),
            allow_origin_regex=policy.allowed_pattern,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            allow_credentials=True,
        )
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if not self.policy.is_allowed(origin):
                error = ForbiddenOrigin()
                logger.warning(
                    f"{scope['method']} {scope['path']} -> {error.status_code}: "
                    f"origin {origin!r} rejected"
                )
                response = JSONResponse(error.payload(), status_code=error.status_code)
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
