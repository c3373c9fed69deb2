"""
Single-connection HTTP transport for XMS calls.

The transport uses one ``requests.Session`` for its whole lifetime and
executes one request at a time. It knows nothing about status codes;
classification happens in :mod:`xms_client.classifier`.

Design notes:
- Headers are rebuilt per request from the endpoint configuration so that
  no request ever inherits state from a previous one.
- Exchange logging happens only after a complete HTTP exchange; transport
  failures are raised without a log record.
"""

from __future__ import annotations

import logging
import platform
import time
from dataclasses import dataclass
from typing import Callable

import requests

from .config import (
    JSON_CONTENT_TYPE,
    REQUEST_TIMEOUT_SECONDS,
    SDK_VERSION,
    SDK_VERSION_HEADER,
    EndpointConfig,
)
from .errors import TransportError

HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE"})


@dataclass(frozen=True)
class RequestDescriptor:
    """One HTTP request: method, absolute URL and optional JSON body."""

    method: str
    url: str
    body: bytes | None = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{self.method}'")

    @property
    def has_body(self) -> bool:
        return self.body is not None


@dataclass(frozen=True)
class Exchange:
    """Record of one completed HTTP exchange, handed to loggers and observers."""

    method: str
    url: str
    request_body: bytes | None
    response_body: bytes
    status: int
    elapsed: float


def build_user_agent() -> str:
    """
    Compose the User-Agent from the HTTP library and runtime versions.

    Returns:
        String such as ``'python-requests/2.32.3 Python/3.12.4'``.
    """
    return f"python-requests/{requests.__version__} Python/{platform.python_version()}"


def build_headers(token: str, has_body: bool, user_agent: str) -> dict[str, str]:
    """
    Construct the fixed header set sent with every XMS request.

    Args:
        token: Bearer token from the endpoint configuration.
        has_body: Whether the request carries a JSON body.
        user_agent: Value for the ``User-Agent`` header.

    Returns:
        Dict of HTTP header name → value pairs.
    """
    headers = {
        "Accept": JSON_CONTENT_TYPE,
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Authorization": f"Bearer {token}",
        SDK_VERSION_HEADER: SDK_VERSION,
        "User-Agent": user_agent,
    }
    if has_body:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


class Transport:
    """
    Executes XMS requests over a single reusable HTTP session.

    Not thread-safe: one transport serves one caller at a time.

    Attributes:
        config: Endpoint configuration (source of the bearer token).
        timeout: Request timeout in seconds, applied to every call.
    """

    def __init__(
        self,
        config: EndpointConfig,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
        on_exchange: Callable[[Exchange], None] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._on_exchange = on_exchange
        self._user_agent = build_user_agent()
        # A session passed in by the caller stays the caller's to close
        self._owns_session = session is None
        self._session: requests.Session | None = (
            session if session is not None else requests.Session()
        )

    @property
    def closed(self) -> bool:
        return self._session is None

    def execute(self, request: RequestDescriptor) -> tuple[int, bytes]:
        """
        Perform one HTTP exchange.

        Args:
            request: The request to send.

        Returns:
            Tuple of (status code, raw response body).

        Raises:
            TransportError: If the transport is closed or the exchange could
                not complete (DNS failure, connection reset, timeout).
        """
        if self._session is None:
            raise TransportError("Transport is closed")

        headers = build_headers(self.config.token, request.has_body, self._user_agent)

        start = time.monotonic()
        try:
            response = self._session.request(
                request.method,
                request.url,
                data=request.body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}"
            ) from exc
        elapsed = round(time.monotonic() - start, 3)

        exchange = Exchange(
            method=request.method,
            url=request.url,
            request_body=request.body,
            response_body=response.content,
            status=response.status_code,
            elapsed=elapsed,
        )
        self._record(exchange)
        return exchange.status, exchange.response_body

    def _record(self, exchange: Exchange) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(
                "Request: %s; Response (status %d, took %.3fs): %s",
                exchange.request_body,
                exchange.status,
                exchange.elapsed,
                exchange.response_body,
                extra={
                    "request_body": exchange.request_body,
                    "response_body": exchange.response_body,
                    "status": exchange.status,
                    "elapsed": exchange.elapsed,
                },
            )
        if self._on_exchange is not None:
            self._on_exchange(exchange)

    def close(self) -> None:
        """
        Stop using the HTTP session. Safe to call more than once.

        The session is closed only if this transport created it; an injected
        session is released but left open for its owner.
        """
        if self._session is not None:
            if self._owns_session:
                self._session.close()
            self._session = None

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
