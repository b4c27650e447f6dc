"""
Request ID middleware so log lines from one API call can be grouped.
"""
import uuid
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Request ID of the current request context, empty outside a request."""
    return request_id_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an ID.

    An incoming X-Request-ID header is reused, otherwise a short random ID is
    generated. The ID is visible to loguru through ``request_id_filter`` and
    echoed back in the response headers.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or uuid.uuid4().hex[:8]
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            request_id_var.reset(token)


def request_id_filter(record):
    """Loguru filter that stamps request_id onto each record."""
    record["extra"]["request_id"] = get_request_id() or "-"
    return True
