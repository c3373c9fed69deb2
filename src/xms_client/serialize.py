"""
Serialization of request objects into XMS JSON bodies.

No I/O occurs here; every function is a pure transformation from a
domain object to UTF-8 encoded JSON bytes.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any

from .api import (
    BinaryBatchCreate,
    BinaryBatchUpdate,
    GroupAutoUpdate,
    GroupCreate,
    GroupUpdate,
    TextBatchCreate,
    TextBatchUpdate,
)


def _dump(fields: dict[str, Any]) -> bytes:
    """Encode ``fields`` as JSON, dropping keys whose value is ``None``."""
    return json.dumps(
        {key: value for key, value in fields.items() if value is not None}
    ).encode("utf-8")


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _b64(value: bytes | None) -> str | None:
    return base64.b64encode(value).decode("ascii") if value is not None else None


def _hex(value: bytes | None) -> str | None:
    return value.hex() if value is not None else None


def _batch_common(batch: TextBatchCreate | BinaryBatchCreate) -> dict[str, Any]:
    return {
        "from": batch.sender,
        "to": list(batch.recipients),
        "delivery_report": batch.delivery_report,
        "send_at": _timestamp(batch.send_at),
        "expire_at": _timestamp(batch.expire_at),
        "callback_url": batch.callback_url,
        "tags": list(batch.tags) or None,
    }


def text_batch(batch: TextBatchCreate) -> bytes:
    fields = {"type": "mt_text", **_batch_common(batch), "body": batch.body}
    if batch.parameters:
        fields["parameters"] = batch.parameters
    return _dump(fields)


def binary_batch(batch: BinaryBatchCreate) -> bytes:
    """Binary bodies travel base64 encoded; the UDH travels as hex."""
    fields = {
        "type": "mt_binary",
        **_batch_common(batch),
        "body": _b64(batch.body),
        "udh": _hex(batch.udh),
    }
    return _dump(fields)


def _batch_update_common(update: TextBatchUpdate | BinaryBatchUpdate) -> dict[str, Any]:
    return {
        "from": update.sender,
        "to_add": list(update.recipient_insertions) or None,
        "to_remove": list(update.recipient_removals) or None,
        "delivery_report": update.delivery_report,
        "send_at": _timestamp(update.send_at),
        "expire_at": _timestamp(update.expire_at),
        "callback_url": update.callback_url,
    }


def text_batch_update(update: TextBatchUpdate) -> bytes:
    fields = {
        "type": "mt_text",
        **_batch_update_common(update),
        "body": update.body,
        "parameters": update.parameters,
    }
    return _dump(fields)


def binary_batch_update(update: BinaryBatchUpdate) -> bytes:
    fields = {
        "type": "mt_binary",
        **_batch_update_common(update),
        "body": _b64(update.body),
        "udh": _hex(update.udh),
    }
    return _dump(fields)


def _auto_update(auto_update: GroupAutoUpdate | None) -> dict[str, Any] | None:
    if auto_update is None:
        return None

    def pair(words):
        first, second = words
        if first is None and second is None:
            return None
        return {
            key: value
            for key, value in (("first_word", first), ("second_word", second))
            if value is not None
        }

    fields = {
        "to": auto_update.recipient,
        "add": pair(auto_update.add_word_pair),
        "remove": pair(auto_update.remove_word_pair),
    }
    return {key: value for key, value in fields.items() if value is not None}


def group(group_create: GroupCreate) -> bytes:
    fields = {
        "name": group_create.name,
        "members": list(group_create.members) or None,
        "child_groups": list(group_create.child_groups) or None,
        "auto_update": _auto_update(group_create.auto_update),
        "tags": list(group_create.tags) or None,
    }
    return _dump(fields)


def group_update(update: GroupUpdate) -> bytes:
    fields = {
        "name": update.name,
        "add": list(update.member_insertions) or None,
        "remove": list(update.member_removals) or None,
        "child_groups_add": list(update.child_group_insertions) or None,
        "child_groups_remove": list(update.child_group_removals) or None,
        "add_from_group": update.add_from_group,
        "remove_from_group": update.remove_from_group,
        "auto_update": _auto_update(update.auto_update),
    }
    return _dump(fields)


def tags(tag_list: list[str]) -> bytes:
    return json.dumps({"tags": list(tag_list)}).encode("utf-8")


def tags_update(tags_to_add: list[str], tags_to_remove: list[str]) -> bytes:
    return json.dumps(
        {"add": list(tags_to_add), "remove": list(tags_to_remove)}
    ).encode("utf-8")
