"""
Deserialization of XMS JSON response bodies into domain objects.

All public functions take the raw response body (bytes) and return a
domain object. A body that is not valid JSON, or that lacks a required
field, raises :class:`~xms_client.errors.UnexpectedResponseError` with the
raw body attached.
"""

from __future__ import annotations

import base64
import json
import math
from datetime import datetime
from typing import Any, Callable, TypeVar

from .api import (
    BinaryBatchResult,
    BinaryInbound,
    DeliveryReport,
    DeliveryReportStatus,
    DryRunPerRecipient,
    DryRunResult,
    ErrorResponse,
    GroupAutoUpdate,
    GroupResult,
    Page,
    RecipientDeliveryReport,
    TextBatchResult,
    TextInbound,
)
from .errors import UnexpectedResponseError

R = TypeVar("R")


def _parse(
    body: bytes,
    what: str,
    build: Callable[[Any], R],
    expect: type = dict,
) -> R:
    """
    Decode ``body`` as JSON and hand it to ``build``.

    Decoding and field-access failures, and a top-level value that is not
    an ``expect`` instance, are reported uniformly as
    :class:`UnexpectedResponseError` so callers see one error type.
    """
    try:
        decoded = json.loads(body)
        if not isinstance(decoded, expect):
            raise TypeError(
                f"expected a JSON {expect.__name__}, got {type(decoded).__name__}"
            )
        return build(decoded)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise UnexpectedResponseError(
            f"Failed to parse {what} response: {exc}", body
        ) from exc


def _list_of_strings(value: Any, what: str) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"{what} must be a JSON array, got {type(value).__name__}")
    return [str(item) for item in value]


def _timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------

def _batch_from_fields(fields: dict) -> TextBatchResult | BinaryBatchResult:
    common = {
        "batch_id": fields["id"],
        "sender": fields["from"],
        "recipients": list(fields.get("to", [])),
        "canceled": bool(fields.get("canceled", False)),
        "created_at": _timestamp(fields.get("created_at")),
        "modified_at": _timestamp(fields.get("modified_at")),
        "delivery_report": fields.get("delivery_report"),
        "send_at": _timestamp(fields.get("send_at")),
        "expire_at": _timestamp(fields.get("expire_at")),
        "callback_url": fields.get("callback_url"),
    }

    batch_type = fields["type"]
    if batch_type == "mt_text":
        return TextBatchResult(
            body=fields["body"],
            parameters=fields.get("parameters", {}),
            **common,
        )
    if batch_type == "mt_binary":
        return BinaryBatchResult(
            body=base64.b64decode(fields["body"]),
            udh=bytes.fromhex(fields["udh"]),
            **common,
        )
    raise ValueError(f"unknown batch type '{batch_type}'")


def batch_response(body: bytes) -> TextBatchResult | BinaryBatchResult:
    return _parse(body, "batch", _batch_from_fields)


def batch_dry_run(body: bytes) -> DryRunResult:
    def build(fields: dict) -> DryRunResult:
        per_recipient = [
            DryRunPerRecipient(
                recipient=item["recipient"],
                number_of_parts=item["number_of_parts"],
                body=item["body"],
                encoding=item["encoding"],
            )
            for item in fields.get("per_recipient", [])
        ]
        return DryRunResult(
            number_of_recipients=fields["number_of_recipients"],
            number_of_messages=fields["number_of_messages"],
            per_recipient=per_recipient,
        )

    return _parse(body, "dry run", build)


def batch_delivery_report(body: bytes) -> DeliveryReport:
    def build(fields: dict) -> DeliveryReport:
        statuses = [
            DeliveryReportStatus(
                code=item["code"],
                status=item["status"],
                count=item["count"],
                recipients=list(item.get("recipients", [])),
            )
            for item in fields["statuses"]
        ]
        return DeliveryReport(
            batch_id=fields["batch_id"],
            total_message_count=fields["total_message_count"],
            statuses=statuses,
        )

    return _parse(body, "delivery report", build)


def batch_recipient_delivery_report(body: bytes) -> RecipientDeliveryReport:
    def build(fields: dict) -> RecipientDeliveryReport:
        return RecipientDeliveryReport(
            batch_id=fields["batch_id"],
            recipient=fields["recipient"],
            code=fields["code"],
            status=fields["status"],
            status_at=_timestamp(fields.get("at")),
            status_message=fields.get("status_message"),
            operator=fields.get("operator"),
            operator_status_at=_timestamp(fields.get("operator_status_at")),
        )

    return _parse(body, "recipient delivery report", build)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

def _auto_update_from_fields(fields: dict | None) -> GroupAutoUpdate | None:
    if fields is None:
        return None
    add = fields.get("add") or {}
    remove = fields.get("remove") or {}
    return GroupAutoUpdate(
        recipient=fields["to"],
        add_word_pair=(add.get("first_word"), add.get("second_word")),
        remove_word_pair=(remove.get("first_word"), remove.get("second_word")),
    )


def _group_from_fields(fields: dict) -> GroupResult:
    return GroupResult(
        group_id=fields["id"],
        name=fields.get("name"),
        size=fields["size"],
        child_groups=list(fields.get("child_groups", [])),
        auto_update=_auto_update_from_fields(fields.get("auto_update")),
        created_at=_timestamp(fields.get("created_at")),
        modified_at=_timestamp(fields.get("modified_at")),
    )


def group_response(body: bytes) -> GroupResult:
    return _parse(body, "group", _group_from_fields)


def group_members(body: bytes) -> list[str]:
    return _parse(
        body,
        "group members",
        lambda members: _list_of_strings(members, "members"),
        expect=list,
    )


# ---------------------------------------------------------------------------
# Inbound messages
# ---------------------------------------------------------------------------

def _inbound_from_fields(fields: dict) -> TextInbound | BinaryInbound:
    common = {
        "message_id": fields["id"],
        "sender": fields["from"],
        "recipient": fields["to"],
        "operator": fields.get("operator"),
        "sent_at": _timestamp(fields.get("sent_at")),
        "received_at": _timestamp(fields.get("received_at")),
    }

    message_type = fields["type"]
    if message_type == "mo_text":
        return TextInbound(body=fields["body"], keyword=fields.get("keyword"), **common)
    if message_type == "mo_binary":
        return BinaryInbound(
            body=base64.b64decode(fields["body"]),
            udh=bytes.fromhex(fields["udh"]),
            **common,
        )
    raise ValueError(f"unknown inbound message type '{message_type}'")


def mo_sms(body: bytes) -> TextInbound | BinaryInbound:
    return _parse(body, "inbound message", _inbound_from_fields)


# ---------------------------------------------------------------------------
# Pages, tags, errors
# ---------------------------------------------------------------------------

def total_pages(page: int, size: int, total_size: int) -> int:
    """
    Number of pages in a listing, as seen from one page of it.

    Exact for every full page. On a short last page the estimate may be
    larger than the true count, which is why the paginator takes the page
    count from page 0.

    Args:
        page: Index of the page the figures come from.
        size: Items on that page.
        total_size: Items over all pages.

    Returns:
        Page count; ``0`` for an empty listing.
    """
    if total_size == 0:
        return 0
    if size == 0:
        # Past the end of the listing
        return page
    return max(math.ceil(total_size / size), page + 1)


def _page(body: bytes, what: str, key: str, item: Callable[[dict], R]) -> Page[R]:
    def build(fields: dict) -> Page[R]:
        content = [item(entry) for entry in fields[key]]
        return Page(
            page=fields["page"],
            size=fields["page_size"],
            total_size=fields["count"],
            total_pages=total_pages(fields["page"], fields["page_size"], fields["count"]),
            content=content,
        )

    return _parse(body, what, build)


def batches_page(body: bytes) -> Page[TextBatchResult | BinaryBatchResult]:
    return _page(body, "batches page", "batches", _batch_from_fields)


def groups_page(body: bytes) -> Page[GroupResult]:
    return _page(body, "groups page", "groups", _group_from_fields)


def inbounds_page(body: bytes) -> Page[TextInbound | BinaryInbound]:
    return _page(body, "inbounds page", "inbounds", _inbound_from_fields)


def tags(body: bytes) -> list[str]:
    return _parse(body, "tags", lambda fields: _list_of_strings(fields["tags"], "tags"))


def error(body: bytes) -> ErrorResponse:
    return _parse(
        body,
        "error",
        lambda fields: ErrorResponse(code=fields["code"], text=fields["text"]),
    )
