"""Cross-Origin Policy — CORS for /api/ paths with a fixed origin allow-list.

Invariants:
    - Only paths under path_prefix are subject to the policy; others pass through
    - Allowed preflight → 200 echoing the specific origin (never "*") with credentials
    - Rejected preflight (origin or method) → 403 with no Access-Control-Allow-* headers
    - Simple requests from non-allowed origins proceed but get no Access-Control-Allow-* headers

Design Decisions:
    - Subclass of Starlette's CORSMiddleware: header computation stays upstream;
      this class only narrows scope and changes the rejection behavior
"""

import logging

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


class ApiCORSMiddleware(CORSMiddleware):
    """CORSMiddleware restricted to a path prefix, rejecting with 403."""

    def __init__(
        self,
        app: ASGIApp,
        allow_origins: list[str],
        path_prefix: str = "/api/",
        max_age: int = 3600,
    ) -> None:
        super().__init__(
            app,
            allow_origins=allow_origins,
            allow_methods=CORS_ALLOWED_METHODS,
            allow_headers=["*"],
            allow_credentials=True,
            max_age=max_age,
        )
        self.path_prefix = path_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefix):
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        origin = headers.get("origin")
        is_preflight = (
            scope["method"] == "OPTIONS"
            and "access-control-request-method" in headers
        )
        if origin is not None and not is_preflight and not self.is_allowed_origin(origin):
            await self.app(scope, receive, send)
            return

        await super().__call__(scope, receive, send)

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers=request_headers)
        if response.status_code != 200:
            logger.warning(
                f"Rejected CORS preflight from {request_headers.get('origin')}",
                extra={"status_code": 403},
            )
            return PlainTextResponse("Invalid CORS request", status_code=403)
        return response
