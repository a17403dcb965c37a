"""Cross-cutting adapter utilities: error formatting and rate limiting."""

from .exception_handler import (
    client_error_body,
    format_exception_json,
    get_error_code,
    get_http_status_code,
    log_exception,
)
from .rate_limiter import RateLimiter

__all__ = [
    "RateLimiter",
    "client_error_body",
    "format_exception_json",
    "get_error_code",
    "get_http_status_code",
    "log_exception",
]
