from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import re
import uuid
import time

logger = logging.getLogger(__name__)

MAX_REQUEST_ID_LENGTH = 128
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._:-]+")


def resolve_request_id(supplied: str = None) -> str:
    """Reuse a well-formed client request id, otherwise generate one."""
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH and _REQUEST_ID_RE.fullmatch(supplied):
        return supplied
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = int((time.time() - start_time) * 1000)
        response.headers["X-Request-ID"] = request.state.request_id
        logger.info(
            "%s %s -> %d in %dms [%s]",
            request.method, request.url.path, response.status_code, elapsed_ms, request.state.request_id,
        )
        return response
