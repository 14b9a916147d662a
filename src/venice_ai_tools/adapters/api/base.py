"""
Shared HTTP utilities for API adapters.

The helper provides a thin HTTPX wrapper: it keeps the code synchronous, avoids
global state, and surfaces rich error messages when endpoints fail. Every call is
attempted exactly once; failures are classified as transport errors (the request
never produced a response) or upstream errors (the provider answered with a
non-success status or an undecodable payload).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import httpx

from ...core.logging import get_logger
from ..base import AdapterError, ErrorKind

FilePart = Tuple[str, bytes, str]


class APIError(AdapterError):
    """Raised when an HTTP API call fails."""


class TransportError(APIError):
    """The request could not be completed (DNS, connect, read, protocol errors)."""

    kind = ErrorKind.TRANSPORT


class UpstreamError(APIError):
    """The provider returned a non-success status or a malformed payload."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True, frozen=True)
class RequestDescriptor:
    """
    Transient description of one outgoing call.

    Exactly one of ``json_body`` or ``form_data``/``files`` is expected for
    write requests. ``binary_response`` asks the client not to decode the body.
    """

    method: str
    path: str
    params: Mapping[str, Any] = field(default_factory=dict)
    json_body: Optional[Mapping[str, Any]] = None
    form_data: Optional[Mapping[str, str]] = None
    files: Optional[Mapping[str, FilePart]] = None
    binary_response: bool = False


@dataclass(slots=True, frozen=True)
class APIResponse:
    status_code: int
    headers: Mapping[str, str]
    content: bytes
    url: str = ""

    @property
    def content_type(self) -> Optional[str]:
        """Media type without parameters such as ``charset``."""

        value = self.headers.get("content-type")
        if not value:
            return None
        media_type = value.split(";", 1)[0].strip()
        return media_type or None

    def json(self) -> Any:
        try:
            return json.loads(self.content)
        except ValueError as exc:
            raise UpstreamError(f"Failed to decode JSON from {self.url or 'response'}: {exc}", status_code=self.status_code) from exc


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base synchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    timeout:
        Request timeout in seconds. ``None`` leaves the call unbounded.
    default_headers:
        Headers automatically attached to every request.
    transport:
        Optional HTTPX transport, e.g. :class:`httpx.MockTransport` in tests.
    """

    base_url: str
    timeout: Optional[float] = None
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    transport: Optional[httpx.BaseTransport] = None
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"base_url": self.base_url},
        )

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=dict(self.default_headers),
            follow_redirects=True,
            transport=self.transport,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"HTTP {exc.response.status_code} error for {exc.request.method} {exc.request.url}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.logger.debug(
            "HTTP request",
            extra={"method": method, "url": url, "params": kwargs.get("params")},
        )
        try:
            with self._build_client() as client:
                response = client.request(method, url, **kwargs)
                response.read()
        except httpx.HTTPError as exc:
            self.logger.error(
                "HTTP error during request",
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise TransportError(f"HTTP error while calling {method} {url}: {exc}") from exc

        self._raise_for_status(response)
        self.logger.debug(
            "HTTP response",
            extra={"status_code": response.status_code, "url": str(response.url)},
        )
        return response

    def send(self, request: RequestDescriptor) -> APIResponse:
        """Issue ``request`` once and return the raw response."""

        kwargs: MutableMapping[str, Any] = {}
        if not request.binary_response:
            kwargs["headers"] = {"Accept": "application/json"}
        if request.params:
            kwargs["params"] = dict(request.params)
        if request.json_body is not None:
            kwargs["json"] = dict(request.json_body)
        if request.form_data is not None:
            kwargs["data"] = dict(request.form_data)
        if request.files is not None:
            kwargs["files"] = dict(request.files)
        response = self._request(request.method, request.path, **kwargs)
        return APIResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
            url=str(response.url),
        )

    def _get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.send(RequestDescriptor(method="GET", path=url, params=params or {})).json()
