"""Request correlation and access logging."""

import re
import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from wms.core.logging import get_logger, profile_id_ctx, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Handheld scanners and the front end send their own ids; anything that
# could break a log line or a header is replaced.
_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def incoming_request_id(request: Request) -> str:
    """Reuse the caller's X-Request-ID when it is safe, otherwise mint a UUID."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _SAFE_REQUEST_ID.fullmatch(supplied):
        return supplied
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind the request id for logging, log the request, echo the header."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = incoming_request_id(request)
        request_token = request_id_ctx.set(request_id)
        actor_token = profile_id_ctx.set(None)
        path = request.url.path
        started = time.perf_counter()

        try:
            logger.info("http.request_started", method=request.method, path=path)
            response = await call_next(request)

            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "http.request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            profile_id_ctx.reset(actor_token)
            request_id_ctx.reset(request_token)
