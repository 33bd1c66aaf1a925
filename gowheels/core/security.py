from typing import Iterable

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from gowheels.core.config import normalize_origin
from gowheels.core.logger import logger


class OriginAllowListMiddleware:
    """
    Rejects browser requests coming from origins outside the allow-list.

    Requests without an Origin header (curl, server-to-server) pass through.
    Runs in front of CORSMiddleware so preflights from unknown origins are
    refused as well.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        self.app = app
        self.allowed_origins = {normalize_origin(origin) for origin in allowed_origins}

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = None
        for key, value in scope.get("headers", []):
            if key == b"origin":
                origin = value.decode("latin-1")
                break

        if origin is not None and normalize_origin(origin) not in self.allowed_origins:
            logger.warning(f"🚫 Blocked request from origin {origin}")
            response = JSONResponse(
                status_code=403,
                content={"message": f"CORS policy: This origin ({origin}) is not allowed."},
            )
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
