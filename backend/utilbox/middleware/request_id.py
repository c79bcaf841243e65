"""
Utilbox Backend: Request ID Middleware
=======================================

What:  Assigns a correlation ID to each request and returns it to the client.
Why:   The same ID appears in the access log line, in every warning logged
       while handling the request, in the X-Request-ID response header and in
       the `requestId` field of error envelopes, so a client reporting an
       error can be matched to the server-side log entries.
How:   A client-supplied X-Request-ID is reused only if it is a short token of
       safe characters; anything else (spaces, control characters, CR/LF that
       could forge log lines, overly long values) is replaced by a generated
       ID. The ID is stored in a ContextVar (read by the access logger and the
       exception handlers) and in request.state.
Who:   Outermost user middleware, added last in create_app().
"""

import logging
import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Accepted client IDs: UUIDs, trace tokens like "trace-123", "web.42_a"
VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    """8 hex characters: short enough to read in logs, enough for correlation."""
    return uuid.uuid4().hex[:8]


def resolve_request_id(client_value: str | None) -> str:
    """
    Return the client's ID when it is safe to log and echo, else a new one.

    Examples:
        "trace-123"        → "trace-123"
        None               → "3f9a0c1b" (generated)
        "abc\\r\\nFAKE LOG"  → "7d2e4f60" (generated)
    """
    if client_value and VALID_REQUEST_ID.fullmatch(client_value):
        return client_value
    if client_value:
        logger.debug("Ignoring malformed %s header (%d chars)", REQUEST_ID_HEADER, len(client_value))
    return generate_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        # ContextVar for loggers and exception handlers, request.state for routes
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
