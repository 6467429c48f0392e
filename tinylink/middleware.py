import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Reject browser requests from origins outside the allow-list.

    CORSMiddleware only withholds the response headers on simple requests,
    so without this the handler would still run. Requests without an Origin
    header (curl, server-to-server) always pass.
    """

    def __init__(self, app, allow_origins):
        super().__init__(app)
        self.allow_origins = set(allow_origins)

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is None or origin in self.allow_origins:
            return await call_next(request)

        logger.warning("Rejected %s %s from origin %s", request.method, request.url.path, origin)
        return JSONResponse(status_code=403, content={"error": "Not allowed by CORS"})
