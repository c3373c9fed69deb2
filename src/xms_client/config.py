"""
Endpoint, protocol, and environment configuration for the XMS client.

All constants used across the transport, builder and client modules are
centralized here so that configuration is separated from logic.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Endpoint configuration
# ---------------------------------------------------------------------------

DEFAULT_ENDPOINT = "https://api.clxcommunications.com/xms"

# Path segment inserted between the endpoint and the service plan id
API_VERSION = "v1"

# HTTP request timeout applied uniformly to every call
REQUEST_TIMEOUT_SECONDS: float = 30

# ---------------------------------------------------------------------------
# Environment variables read by Client.from_env()
# ---------------------------------------------------------------------------

SERVICE_PLAN_ID_ENV = "XMS_SERVICE_PLAN_ID"
TOKEN_ENV = "XMS_TOKEN"
ENDPOINT_ENV = "XMS_ENDPOINT"

# ---------------------------------------------------------------------------
# Protocol constants
# ---------------------------------------------------------------------------

SDK_VERSION = "1.0.0"
SDK_VERSION_HEADER = "X-CLX-SDK-Version"
JSON_CONTENT_TYPE = "application/json"

# Statuses the classifier knows about; everything else is unexpected
SUCCESS_STATUSES: frozenset[int] = frozenset({200, 201})
API_ERROR_STATUSES: frozenset[int] = frozenset({400, 403})
NOT_FOUND_STATUS = 404
UNAUTHORIZED_STATUS = 401


@dataclass(frozen=True)
class EndpointConfig:
    """
    Immutable endpoint triple fixed at client construction.

    Every request URL is derived from these three values plus a
    resource path (see :mod:`xms_client.builder`).
    """

    endpoint: str
    service_plan_id: str
    token: str

    def __post_init__(self) -> None:
        if not self.service_plan_id:
            raise ValueError("service_plan_id cannot be empty")
        if not self.token:
            raise ValueError("token cannot be empty")
        # Normalize so that URL joins never produce a double slash
        object.__setattr__(self, "endpoint", self.endpoint.rstrip("/"))

    def __repr__(self) -> str:
        return (
            f"EndpointConfig(endpoint={self.endpoint!r}, "
            f"service_plan_id={self.service_plan_id!r}, token='***')"
        )


def load_endpoint_config() -> EndpointConfig:
    """
    Build an :class:`EndpointConfig` from environment variables.

    ``XMS_ENDPOINT`` is optional and falls back to :data:`DEFAULT_ENDPOINT`.

    Returns:
        The endpoint configuration.

    Raises:
        ValueError: If ``XMS_SERVICE_PLAN_ID`` or ``XMS_TOKEN`` is unset.
    """
    values = {}
    for env_var in (SERVICE_PLAN_ID_ENV, TOKEN_ENV):
        value = os.getenv(env_var)
        if not value:
            raise ValueError(
                f"XMS credentials not found. Set the '{env_var}' environment "
                "variable before creating the client."
            )
        values[env_var] = value

    return EndpointConfig(
        endpoint=os.getenv(ENDPOINT_ENV) or DEFAULT_ENDPOINT,
        service_plan_id=values[SERVICE_PLAN_ID_ENV],
        token=values[TOKEN_ENV],
    )
