"""
HTTP client layer for the Venice AI REST API.

* :class:`BaseAPIClient` wraps low-level HTTPX calls and error classification.
* :class:`VeniceClient` adds bearer authentication and the provider base URL.
"""

from .base import APIError, APIResponse, BaseAPIClient, RequestDescriptor, TransportError, UpstreamError
from .venice import VeniceClient, VeniceConnectionAdapter

__all__ = [
    "APIError",
    "APIResponse",
    "BaseAPIClient",
    "RequestDescriptor",
    "TransportError",
    "UpstreamError",
    "VeniceClient",
    "VeniceConnectionAdapter",
]
