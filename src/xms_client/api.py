"""
Domain value objects for the XMS API.

Request objects (``*Create``, ``*Update``) are what callers build and hand
to the client; result objects are what the deserializer produces from
server responses. Filters are immutable and validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, Sequence, TypeVar, Union

T = TypeVar("T")


class ReportType:
    """Delivery report types accepted by XMS."""

    NONE = "none"
    SUMMARY = "summary"
    FULL = "full"
    PER_RECIPIENT = "per_recipient"


class DeliveryStatus:
    """Delivery statuses reported in delivery reports."""

    QUEUED = "Queued"
    DISPATCHED = "Dispatched"
    ABORTED = "Aborted"
    REJECTED = "Rejected"
    DELIVERED = "Delivered"
    FAILED = "Failed"
    EXPIRED = "Expired"
    UNKNOWN = "Unknown"


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------

@dataclass
class TextBatchCreate:
    """
    Description of a text batch to create.

    ``parameters`` maps a template parameter name to a dict of
    recipient → value; the key ``'default'`` supplies a fallback value.
    """

    sender: str
    recipients: list[str]
    body: str
    parameters: dict[str, dict[str, str]] = field(default_factory=dict)
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class BinaryBatchCreate:
    """Description of a binary batch to create; ``body`` and ``udh`` are raw bytes."""

    sender: str
    recipients: list[str]
    body: bytes
    udh: bytes
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None
    tags: list[str] = field(default_factory=list)


# Closed set of batch creation variants
BatchCreate = Union[TextBatchCreate, BinaryBatchCreate]


@dataclass
class TextBatchUpdate:
    """Changes to apply to an existing text batch. ``None`` leaves a field untouched."""

    recipient_insertions: list[str] = field(default_factory=list)
    recipient_removals: list[str] = field(default_factory=list)
    sender: str | None = None
    body: str | None = None
    parameters: dict[str, dict[str, str]] | None = None
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None


@dataclass
class BinaryBatchUpdate:
    """Changes to apply to an existing binary batch."""

    recipient_insertions: list[str] = field(default_factory=list)
    recipient_removals: list[str] = field(default_factory=list)
    sender: str | None = None
    body: bytes | None = None
    udh: bytes | None = None
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None


@dataclass(frozen=True)
class TextBatchResult:
    """A text batch as stored by XMS."""

    batch_id: str
    sender: str
    recipients: list[str]
    body: str
    parameters: dict[str, dict[str, str]]
    canceled: bool
    created_at: datetime | None = None
    modified_at: datetime | None = None
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None


@dataclass(frozen=True)
class BinaryBatchResult:
    """A binary batch as stored by XMS."""

    batch_id: str
    sender: str
    recipients: list[str]
    body: bytes
    udh: bytes
    canceled: bool
    created_at: datetime | None = None
    modified_at: datetime | None = None
    delivery_report: str | None = None
    send_at: datetime | None = None
    expire_at: datetime | None = None
    callback_url: str | None = None


BatchResult = Union[TextBatchResult, BinaryBatchResult]


@dataclass(frozen=True)
class DryRunPerRecipient:
    recipient: str
    number_of_parts: int
    body: str
    encoding: str


@dataclass(frozen=True)
class DryRunResult:
    """Outcome of simulating a batch send."""

    number_of_recipients: int
    number_of_messages: int
    per_recipient: list[DryRunPerRecipient] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Delivery reports
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeliveryReportStatus:
    code: int
    status: str
    count: int
    recipients: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeliveryReport:
    """Summary or full delivery report for a batch."""

    batch_id: str
    total_message_count: int
    statuses: list[DeliveryReportStatus]


@dataclass(frozen=True)
class RecipientDeliveryReport:
    """Delivery report for a single batch recipient."""

    batch_id: str
    recipient: str
    code: int
    status: str
    status_at: datetime | None = None
    status_message: str | None = None
    operator: str | None = None
    operator_status_at: datetime | None = None


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GroupAutoUpdate:
    """
    Keyword rule that adds or removes the sender of an inbound message.

    When ``recipient`` receives a message whose first (and optionally
    second) word match ``add_word_pair`` the sender is added to the group;
    ``remove_word_pair`` works the same way for removal. ``None`` in a pair
    means that keyword is not considered.
    """

    recipient: str
    add_word_pair: tuple[str | None, str | None] = (None, None)
    remove_word_pair: tuple[str | None, str | None] = (None, None)

    def __post_init__(self) -> None:
        if not self.recipient:
            raise ValueError("recipient cannot be empty")
        # Accept short pairs such as ('add',)
        object.__setattr__(self, "add_word_pair", _pad_pair(self.add_word_pair))
        object.__setattr__(self, "remove_word_pair", _pad_pair(self.remove_word_pair))


def _pad_pair(pair: Sequence[str | None]) -> tuple[str | None, str | None]:
    if len(pair) > 2:
        raise ValueError("a keyword pair holds at most two words")
    padded = list(pair) + [None] * (2 - len(pair))
    return padded[0], padded[1]


@dataclass
class GroupCreate:
    name: str | None = None
    members: list[str] = field(default_factory=list)
    child_groups: list[str] = field(default_factory=list)
    auto_update: GroupAutoUpdate | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class GroupUpdate:
    """Changes to apply to a group. ``name`` of ``None`` keeps the current name."""

    name: str | None = None
    member_insertions: list[str] = field(default_factory=list)
    member_removals: list[str] = field(default_factory=list)
    child_group_insertions: list[str] = field(default_factory=list)
    child_group_removals: list[str] = field(default_factory=list)
    add_from_group: str | None = None
    remove_from_group: str | None = None
    auto_update: GroupAutoUpdate | None = None


@dataclass(frozen=True)
class GroupResult:
    group_id: str
    name: str | None
    size: int
    child_groups: list[str]
    auto_update: GroupAutoUpdate | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None


# ---------------------------------------------------------------------------
# Inbound (mobile originated) messages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextInbound:
    message_id: str
    sender: str
    recipient: str
    body: str
    keyword: str | None = None
    operator: str | None = None
    sent_at: datetime | None = None
    received_at: datetime | None = None


@dataclass(frozen=True)
class BinaryInbound:
    message_id: str
    sender: str
    recipient: str
    body: bytes
    udh: bytes
    operator: str | None = None
    sent_at: datetime | None = None
    received_at: datetime | None = None


Inbound = Union[TextInbound, BinaryInbound]


# ---------------------------------------------------------------------------
# Errors and pages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorResponse:
    """Body of a 400/403 response."""

    code: str
    text: str


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One page of a listing.

    Attributes:
        page: 0-based index of this page.
        size: Number of items on this page.
        total_size: Number of items over all pages.
        total_pages: Number of pages in the listing.
        content: The items on this page, in server order.
    """

    page: int
    size: int
    total_size: int
    total_pages: int
    content: Sequence[T]

    def __iter__(self):
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def _check_page_size(page_size: int | None) -> None:
    if page_size is not None and page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")


def _freeze_values(instance, *names: str) -> None:
    """
    Copy list-valued filter fields into tuples.

    The caller's list is never shared with the filter, so changing it
    afterwards cannot alter queries for later pages.

    Raises:
        ValueError: A field holds a bare string instead of a sequence.
    """
    for name in names:
        value = getattr(instance, name)
        if value is None:
            continue
        if isinstance(value, (str, bytes)):
            raise ValueError(f"{name} must be a sequence of strings, not {value!r}")
        object.__setattr__(instance, name, tuple(value))


@dataclass(frozen=True)
class BatchFilter:
    page_size: int | None = None
    senders: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None
    start_date: date | None = None
    end_date: date | None = None

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)
        _freeze_values(self, "senders", "tags")


@dataclass(frozen=True)
class GroupFilter:
    page_size: int | None = None
    tags: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)
        _freeze_values(self, "tags")


@dataclass(frozen=True)
class InboundsFilter:
    page_size: int | None = None
    recipients: tuple[str, ...] | None = None
    start_date: date | None = None
    end_date: date | None = None

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)
        _freeze_values(self, "recipients")
