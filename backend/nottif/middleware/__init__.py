"""
Middleware modules for Nottif.
"""
from nottif.middleware.request_id import RequestIdMiddleware, get_request_id, request_id_filter

__all__ = ["RequestIdMiddleware", "get_request_id", "request_id_filter"]
