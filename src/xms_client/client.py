"""
Public client for the XMS REST API.

Each operation composes the same pipeline: build the URL (builder) and
body (serialize), execute it over the transport, classify the response,
then deserialize the body into the expected domain object. List
operations return a :class:`~xms_client.pages.Pages` immediately and run
that pipeline once per page as the caller iterates.

Example::

    with Client("my-service-plan", "my-token") as client:
        batch = client.create_text_batch(TextBatchCreate(
            sender="12345",
            recipients=["987654321", "123456789"],
            body="Hello, ${name}!",
            parameters={"name": {"987654321": "Mary", "default": "valued customer"}},
        ))
        print(f"The batch was given ID {batch.batch_id}")

The client is not thread-safe; use one instance per thread.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import requests

from . import builder, deserialize, serialize
from .api import (
    BatchCreate,
    BatchFilter,
    BinaryBatchCreate,
    BinaryBatchUpdate,
    DeliveryReport,
    DryRunResult,
    GroupCreate,
    GroupFilter,
    GroupResult,
    GroupUpdate,
    InboundsFilter,
    RecipientDeliveryReport,
    TextBatchCreate,
    TextBatchUpdate,
)
from .classifier import classify_response
from .config import (
    DEFAULT_ENDPOINT,
    REQUEST_TIMEOUT_SECONDS,
    EndpointConfig,
    load_endpoint_config,
)
from .errors import InvalidArgumentError
from .pages import Pages
from .transport import Exchange, RequestDescriptor, Transport


def serialize_batch(batch: BatchCreate) -> bytes:
    """
    Serialize a batch creation object, dispatching on its variant.

    Raises:
        InvalidArgumentError: ``batch`` is neither a text nor a binary batch.
    """
    if isinstance(batch, TextBatchCreate):
        return serialize.text_batch(batch)
    if isinstance(batch, BinaryBatchCreate):
        return serialize.binary_batch(batch)
    raise InvalidArgumentError(
        f"Expected text or binary batch, got {type(batch).__name__}"
    )


def _require(value: object, expected: type, what: str) -> None:
    if not isinstance(value, expected):
        raise InvalidArgumentError(
            f"Expected {what} ({expected.__name__}), got {type(value).__name__}"
        )


class Client:
    """
    Client used to communicate with the XMS server.

    Uses one HTTP session from construction until :meth:`close` (or the
    end of a ``with`` block). Every operation raises a subclass of
    :class:`~xms_client.errors.XmsError` on failure: ``TransportError``
    when no response arrived, ``ApiError``, ``NotFoundError`` or
    ``UnauthorizedError`` for the matching status codes, and
    ``UnexpectedResponseError`` for any other status or an unreadable body.

    Attributes:
        config: The endpoint configuration all URLs derive from.
    """

    def __init__(
        self,
        service_plan_id: str,
        token: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
        on_exchange: Callable[[Exchange], None] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Args:
            service_plan_id: Service plan the requests are made for.
            token: Bearer token authorizing the service plan.
            endpoint: Base URL of the XMS API, without a trailing slash.
            timeout: Per-request timeout in seconds.
            logger: Receives one DEBUG record per completed exchange;
                defaults to the ``xms_client.transport`` logger.
            on_exchange: Called with an :class:`Exchange` after each
                completed exchange.
            session: ``requests.Session`` to send requests through. A session
                passed here remains the caller's: :meth:`close` stops using
                it but does not close it. When omitted the client creates
                its own session and closes it on :meth:`close`.

        Raises:
            ValueError: ``service_plan_id`` or ``token`` is empty.
        """
        self.config = EndpointConfig(
            endpoint=endpoint, service_plan_id=service_plan_id, token=token
        )
        self._transport = Transport(
            self.config,
            timeout=timeout,
            logger=logger,
            on_exchange=on_exchange,
            session=session,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "Client":
        """
        Create a client from ``XMS_SERVICE_PLAN_ID``, ``XMS_TOKEN`` and the
        optional ``XMS_ENDPOINT`` environment variables.

        Raises:
            ValueError: A required variable is unset.
        """
        config = load_endpoint_config()
        return cls(config.service_plan_id, config.token, endpoint=config.endpoint, **kwargs)

    # -- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Release the HTTP session; later calls raise ``TransportError``."""
        self._transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Client(service_plan_id={self.config.service_plan_id!r}, "
            f"endpoint={self.config.endpoint!r})"
        )

    # -- request pipeline ---------------------------------------------------

    def _call(self, method: str, url: str, body: bytes | None = None) -> bytes:
        status, response_body = self._transport.execute(
            RequestDescriptor(method=method, url=url, body=body)
        )
        return classify_response(
            status,
            response_body,
            url,
            self.config.service_plan_id,
            self.config.token,
        )

    def _get(self, url: str) -> bytes:
        return self._call("GET", url)

    def _delete(self, url: str) -> bytes:
        return self._call("DELETE", url)

    def _post(self, url: str, body: bytes) -> bytes:
        return self._call("POST", url, body)

    def _put(self, url: str, body: bytes) -> bytes:
        return self._call("PUT", url, body)

    # -- batches ------------------------------------------------------------

    def create_batch(self, batch: BatchCreate):
        """
        Create a text or binary batch, whichever ``batch`` describes.

        Args:
            batch: ``TextBatchCreate`` or ``BinaryBatchCreate``.

        Returns:
            The created batch as a ``TextBatchResult`` or ``BinaryBatchResult``.

        Raises:
            InvalidArgumentError: ``batch`` is neither variant; nothing is sent.
        """
        body = serialize_batch(batch)
        return deserialize.batch_response(
            self._post(builder.build_url(self.config, "/batches"), body)
        )

    def create_text_batch(self, batch: TextBatchCreate):
        """
        Create a text batch.

        Args:
            batch: Sender, recipients, body and optional template parameters.

        Returns:
            The created ``TextBatchResult``, carrying the server-assigned id.

        Raises:
            InvalidArgumentError: ``batch`` is not a ``TextBatchCreate``.
        """
        _require(batch, TextBatchCreate, "text batch")
        return self.create_batch(batch)

    def create_binary_batch(self, batch: BinaryBatchCreate):
        """Create a binary batch. Same contract as :meth:`create_text_batch`."""
        _require(batch, BinaryBatchCreate, "binary batch")
        return self.create_batch(batch)

    def create_batch_dry_run(
        self, batch: BatchCreate, number_of_recipients: int | None = None
    ) -> DryRunResult:
        """
        Simulate sending ``batch``.

        Args:
            batch: Text or binary batch to simulate.
            number_of_recipients: When set, ask for per-recipient details for
                this many recipients.

        Returns:
            The dry-run result.
        """
        body = serialize_batch(batch)
        url = builder.build_dry_run_url(self.config, number_of_recipients)
        return deserialize.batch_dry_run(self._post(url, body))

    def replace_text_batch(self, batch_id: str, batch: TextBatchCreate):
        """
        Replace every field of an existing batch with those of ``batch``.

        Args:
            batch_id: Batch to replace.
            batch: The complete new batch description.

        Returns:
            The batch as stored after the replacement.

        Raises:
            InvalidArgumentError: ``batch`` is not a ``TextBatchCreate``.
            NotFoundError: No batch has id ``batch_id``.
        """
        _require(batch, TextBatchCreate, "text batch")
        body = serialize.text_batch(batch)
        return deserialize.batch_response(
            self._put(builder.build_batch_url(self.config, batch_id), body)
        )

    def replace_binary_batch(self, batch_id: str, batch: BinaryBatchCreate):
        """Binary counterpart of :meth:`replace_text_batch`."""
        _require(batch, BinaryBatchCreate, "binary batch")
        body = serialize.binary_batch(batch)
        return deserialize.batch_response(
            self._put(builder.build_batch_url(self.config, batch_id), body)
        )

    def update_text_batch(self, batch_id: str, update: TextBatchUpdate):
        """
        Apply a partial update to a text batch.

        Args:
            batch_id: Batch to update.
            update: Recipient insertions/removals and the fields to change;
                fields left ``None`` are not sent.

        Returns:
            The batch as stored after the update.

        Raises:
            InvalidArgumentError: ``update`` is not a ``TextBatchUpdate``.
        """
        _require(update, TextBatchUpdate, "text batch update")
        body = serialize.text_batch_update(update)
        return deserialize.batch_response(
            self._post(builder.build_batch_url(self.config, batch_id), body)
        )

    def update_binary_batch(self, batch_id: str, update: BinaryBatchUpdate):
        """Binary counterpart of :meth:`update_text_batch`."""
        _require(update, BinaryBatchUpdate, "binary batch update")
        body = serialize.binary_batch_update(update)
        return deserialize.batch_response(
            self._post(builder.build_batch_url(self.config, batch_id), body)
        )

    def cancel_batch(self, batch_id: str) -> None:
        """Cancel a batch; messages already dispatched are not recalled."""
        self._delete(builder.build_batch_url(self.config, batch_id))

    def fetch_batch(self, batch_id: str):
        """
        Fetch one batch.

        Returns:
            ``TextBatchResult`` or ``BinaryBatchResult``, per the stored type.

        Raises:
            NotFoundError: No batch has id ``batch_id``.
        """
        return deserialize.batch_response(
            self._get(builder.build_batch_url(self.config, batch_id))
        )

    def fetch_batches(self, filter: BatchFilter | None = None) -> Pages:
        """
        Fetch the batches matching ``filter``.

        No network traffic happens here; pages are requested as the returned
        :class:`Pages` is iterated.
        """
        def fetch_page(page: int):
            url = builder.build_batches_url(self.config, page, filter)
            return deserialize.batches_page(self._get(url))

        return Pages(fetch_page)

    def fetch_batch_tags(self, batch_id: str) -> list[str]:
        """Return the tags attached to a batch."""
        return deserialize.tags(
            self._get(builder.build_batch_url(self.config, batch_id, "/tags"))
        )

    def replace_batch_tags(self, batch_id: str, tags: list[str]) -> list[str]:
        """
        Replace all tags of a batch.

        Args:
            batch_id: Batch whose tags change.
            tags: The complete new tag list; empty removes every tag.

        Returns:
            The tags as stored after the replacement.
        """
        url = builder.build_batch_url(self.config, batch_id, "/tags")
        return deserialize.tags(self._put(url, serialize.tags(tags)))

    def update_batch_tags(
        self, batch_id: str, tags_to_add: list[str], tags_to_remove: list[str]
    ) -> list[str]:
        """
        Add and remove individual batch tags.

        Args:
            batch_id: Batch whose tags change.
            tags_to_add: Tags to attach.
            tags_to_remove: Tags to detach.

        Returns:
            The tags as stored after the update.
        """
        url = builder.build_batch_url(self.config, batch_id, "/tags")
        return deserialize.tags(
            self._post(url, serialize.tags_update(tags_to_add, tags_to_remove))
        )

    # -- delivery reports ---------------------------------------------------

    def fetch_delivery_report(
        self,
        batch_id: str,
        report_type: str | None = None,
        status: Iterable[str] | None = None,
        code: Iterable[int] | None = None,
    ) -> DeliveryReport:
        """
        Fetch the delivery report of a batch.

        Args:
            batch_id: Batch identifier.
            report_type: :class:`~xms_client.api.ReportType` value; ``None``
                uses the server default.
            status: Only include these delivery statuses.
            code: Only include these delivery codes.

        Returns:
            The batch delivery report.
        """
        url = builder.build_delivery_report_url(
            self.config, batch_id, report_type, status, code
        )
        return deserialize.batch_delivery_report(self._get(url))

    def fetch_recipient_delivery_report(
        self, batch_id: str, recipient: str
    ) -> RecipientDeliveryReport:
        """
        Fetch the delivery report of one recipient of a batch.

        Args:
            batch_id: Batch identifier.
            recipient: Recipient MSISDN as given when the batch was created.

        Returns:
            The recipient's delivery status, with operator details when known.
        """
        url = builder.build_recipient_delivery_report_url(self.config, batch_id, recipient)
        return deserialize.batch_recipient_delivery_report(self._get(url))

    # -- groups -------------------------------------------------------------

    def create_group(self, group: GroupCreate) -> GroupResult:
        """
        Create a group.

        Args:
            group: Name, initial members, child groups, auto-update rule and tags.

        Returns:
            The created group, carrying the server-assigned id and size.
        """
        return deserialize.group_response(
            self._post(builder.build_url(self.config, "/groups"), serialize.group(group))
        )

    def replace_group(self, group_id: str, group: GroupCreate) -> GroupResult:
        """Replace every field of an existing group with those of ``group``."""
        return deserialize.group_response(
            self._put(builder.build_group_url(self.config, group_id), serialize.group(group))
        )

    def update_group(self, group_id: str, update: GroupUpdate) -> GroupResult:
        """
        Apply a partial update to a group.

        Args:
            group_id: Group to update.
            update: Member and child group changes, name, auto-update rule.

        Returns:
            The group as stored after the update.
        """
        return deserialize.group_response(
            self._post(
                builder.build_group_url(self.config, group_id),
                serialize.group_update(update),
            )
        )

    def delete_group(self, group_id: str) -> None:
        self._delete(builder.build_group_url(self.config, group_id))

    def fetch_group(self, group_id: str) -> GroupResult:
        """
        Fetch one group.

        Raises:
            NotFoundError: No group has id ``group_id``.
        """
        return deserialize.group_response(
            self._get(builder.build_group_url(self.config, group_id))
        )

    def fetch_groups(self, filter: GroupFilter | None = None) -> Pages:
        """Fetch the groups matching ``filter``; pages load lazily."""
        def fetch_page(page: int):
            url = builder.build_groups_url(self.config, page, filter)
            return deserialize.groups_page(self._get(url))

        return Pages(fetch_page)

    def fetch_group_members(self, group_id: str) -> list[str]:
        """Return the MSISDNs of every member of a group."""
        return deserialize.group_members(
            self._get(builder.build_group_url(self.config, group_id, "/members"))
        )

    def fetch_group_tags(self, group_id: str) -> list[str]:
        """Return the tags attached to a group."""
        return deserialize.tags(
            self._get(builder.build_group_url(self.config, group_id, "/tags"))
        )

    def replace_group_tags(self, group_id: str, tags: list[str]) -> list[str]:
        """Replace all tags of a group. See :meth:`replace_batch_tags`."""
        url = builder.build_group_url(self.config, group_id, "/tags")
        return deserialize.tags(self._put(url, serialize.tags(tags)))

    def update_group_tags(
        self, group_id: str, tags_to_add: list[str], tags_to_remove: list[str]
    ) -> list[str]:
        """Add and remove individual group tags. See :meth:`update_batch_tags`."""
        url = builder.build_group_url(self.config, group_id, "/tags")
        return deserialize.tags(
            self._post(url, serialize.tags_update(tags_to_add, tags_to_remove))
        )

    # -- inbound messages ---------------------------------------------------

    def fetch_inbound(self, inbound_id: str):
        """
        Fetch one inbound (mobile originated) message.

        Returns:
            ``TextInbound`` or ``BinaryInbound``, per the message type.

        Raises:
            NotFoundError: No inbound message has id ``inbound_id``.
        """
        return deserialize.mo_sms(self._get(builder.build_inbound_url(self.config, inbound_id)))

    def fetch_inbounds(self, filter: InboundsFilter | None = None) -> Pages:
        """Fetch inbound messages matching ``filter``; pages load lazily."""
        def fetch_page(page: int):
            url = builder.build_inbounds_url(self.config, page, filter)
            return deserialize.inbounds_page(self._get(url))

        return Pages(fetch_page)
