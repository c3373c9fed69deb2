"""
Shared pytest fixtures for the XMS client tests.

HTTP traffic is faked with a ``MagicMock`` standing in for
``requests.Session``; no test touches the network.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from xms_client import Client
from xms_client.config import EndpointConfig


SERVICE_PLAN_ID = "my-plan"
TOKEN = "secret-token-1234"
ENDPOINT = "https://xms.example.com/xms"
BASE_URL = f"{ENDPOINT}/v1/{SERVICE_PLAN_ID}"


# ---------------------------------------------------------------------------
# Response body fixtures (shapes as served by XMS)
# ---------------------------------------------------------------------------

TEXT_BATCH_RESPONSE = {
    "id": "abc123",
    "type": "mt_text",
    "from": "12345",
    "to": ["111", "222"],
    "body": "Hi ${name}!",
    "canceled": False,
    "created_at": "2016-12-01T11:03:13.192Z",
    "modified_at": "2016-12-01T11:03:13.192Z",
    "delivery_report": "none",
}

BINARY_BATCH_RESPONSE = {
    "id": "bin1",
    "type": "mt_binary",
    "from": "12345",
    "to": ["333"],
    "body": "AAEC",  # base64 of b"\x00\x01\x02"
    "udh": "050003cc0201",
    "canceled": True,
}

GROUP_RESPONSE = {
    "id": "grp1",
    "name": "Friends",
    "size": 2,
    "child_groups": [],
    "auto_update": {
        "to": "12345",
        "add": {"first_word": "join"},
        "remove": {"first_word": "leave", "second_word": "now"},
    },
    "created_at": "2016-12-01T11:03:13.192Z",
}

TEXT_INBOUND_RESPONSE = {
    "id": "mo1",
    "type": "mo_text",
    "from": "987654321",
    "to": "12345",
    "body": "hello",
    "keyword": "hello",
    "received_at": "2016-12-03T16:24:23.318Z",
}

ERROR_RESPONSE = {"code": "syntax_invalid_json", "text": "The JSON input is invalid"}


def encode(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


def make_page(key: str, items: list, page: int, page_size: int, count: int) -> bytes:
    """Build a list-endpoint page body."""
    return encode({"page": page, "page_size": page_size, "count": count, key: items})


# ---------------------------------------------------------------------------
# Fake HTTP session
# ---------------------------------------------------------------------------

def make_response(status: int, body: bytes | dict | list = b"") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.content = body if isinstance(body, bytes) else encode(body)
    return response


@pytest.fixture
def session():
    """Fake ``requests.Session``; set ``session.request.return_value`` or ``side_effect``."""
    fake = MagicMock(spec=requests.Session)
    fake.request.return_value = make_response(200, b"{}")
    return fake


@pytest.fixture
def client(session):
    with Client(SERVICE_PLAN_ID, TOKEN, endpoint=ENDPOINT, session=session) as xms:
        yield xms


@pytest.fixture
def endpoint_config():
    return EndpointConfig(endpoint=ENDPOINT, service_plan_id=SERVICE_PLAN_ID, token=TOKEN)


def sent_request(session: MagicMock, index: int = -1) -> tuple[str, str, bytes | None, dict]:
    """Return (method, url, body, headers) of a recorded session call."""
    call = session.request.call_args_list[index]
    method, url = call.args
    return method, url, call.kwargs["data"], call.kwargs["headers"]
