"""
HTTP Client module
"""

from surf_retreats.client.http_client import (
    HttpClient,
    HttpMethod,
    HttpRequestOptions,
    HttpResponse,
    HttpAuditEntry,
    CircuitState,
    CircuitBreakerConfig,
    RequestInterceptor,
    ResponseInterceptor,
)

__all__ = [
    "HttpClient",
    "HttpMethod",
    "HttpRequestOptions",
    "HttpResponse",
    "HttpAuditEntry",
    "CircuitState",
    "CircuitBreakerConfig",
    "RequestInterceptor",
    "ResponseInterceptor",
]
