"""
xms_client — Python client for the XMS messaging REST API.

Module layout
-------------
config.py       — endpoint defaults, protocol constants, EndpointConfig, env loading
errors.py       — exception taxonomy (transport, API, 404, 401, unexpected, argument)
transport.py    — single-session HTTP execution, fixed headers, exchange logging
classifier.py   — status code → success body or typed error
builder.py      — URL paths and deterministic query strings
pages.py        — lazy, restartable pagination over list endpoints
api.py          — request/result value objects, filters, pages
serialize.py    — request objects → JSON bodies
deserialize.py  — JSON bodies → result objects
client.py       — the Client facade

Public interface
----------------
Create a client (or use Client.from_env()):
    with Client(service_plan_id, token) as client: ...

Send and manage batches:
    client.create_text_batch(TextBatchCreate(...))
    client.fetch_batch(batch_id)
    client.fetch_batches(BatchFilter(...))      # lazy Pages

Groups, delivery reports and inbound messages:
    client.create_group(GroupCreate(...))
    client.fetch_delivery_report(batch_id, ReportType.SUMMARY)
    client.fetch_inbounds(InboundsFilter(...))  # lazy Pages
"""

from .api import (
    BatchFilter,
    BinaryBatchCreate,
    BinaryBatchResult,
    BinaryBatchUpdate,
    BinaryInbound,
    DeliveryReport,
    DeliveryReportStatus,
    DeliveryStatus,
    DryRunPerRecipient,
    DryRunResult,
    GroupAutoUpdate,
    GroupCreate,
    GroupFilter,
    GroupResult,
    GroupUpdate,
    InboundsFilter,
    Page,
    RecipientDeliveryReport,
    ReportType,
    TextBatchCreate,
    TextBatchResult,
    TextBatchUpdate,
    TextInbound,
)
from .client import Client
from .config import DEFAULT_ENDPOINT, SDK_VERSION, EndpointConfig
from .errors import (
    ApiError,
    InvalidArgumentError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    UnexpectedResponseError,
    XmsError,
)
from .pages import Pages, PagesIterator
from .transport import Exchange

__version__ = SDK_VERSION

__all__ = [
    # Client
    "Client",
    "EndpointConfig",
    "DEFAULT_ENDPOINT",
    "Exchange",
    # Pagination
    "Pages",
    "PagesIterator",
    "Page",
    # Batches
    "TextBatchCreate",
    "BinaryBatchCreate",
    "TextBatchUpdate",
    "BinaryBatchUpdate",
    "TextBatchResult",
    "BinaryBatchResult",
    "DryRunResult",
    "DryRunPerRecipient",
    "BatchFilter",
    # Delivery reports
    "DeliveryReport",
    "DeliveryReportStatus",
    "RecipientDeliveryReport",
    "ReportType",
    "DeliveryStatus",
    # Groups
    "GroupAutoUpdate",
    "GroupCreate",
    "GroupUpdate",
    "GroupResult",
    "GroupFilter",
    # Inbound messages
    "TextInbound",
    "BinaryInbound",
    "InboundsFilter",
    # Errors
    "XmsError",
    "TransportError",
    "ApiError",
    "NotFoundError",
    "UnauthorizedError",
    "UnexpectedResponseError",
    "InvalidArgumentError",
]
