"""
Unit tests for src/xms_client/classifier.py.

Covers every row of the status-code table: success passthrough, API
errors from the error body, 404, 401, and the catch-all branch.
"""

from __future__ import annotations

import pytest

from conftest import ERROR_RESPONSE, SERVICE_PLAN_ID, TOKEN, encode
from xms_client.classifier import classify_response
from xms_client.errors import (
    ApiError,
    NotFoundError,
    UnauthorizedError,
    UnexpectedResponseError,
)

URL = "https://xms.example.com/xms/v1/my-plan/batches/b1"


def _classify(status: int, body: bytes = b""):
    return classify_response(status, body, URL, SERVICE_PLAN_ID, TOKEN)


class TestSuccess:
    """200 and 201 return the body untouched."""

    @pytest.mark.parametrize("status", [200, 201])
    def test_body_passed_through_byte_for_byte(self, status):
        body = b'{"id":"abc123",  "odd spacing": true}\n'
        assert _classify(status, body) is body

    def test_empty_body_passed_through(self):
        assert _classify(200, b"") == b""


class TestApiError:
    """400 and 403 decode the error body into code and text."""

    @pytest.mark.parametrize("status", [400, 403])
    def test_code_and_text_from_body(self, status):
        with pytest.raises(ApiError) as excinfo:
            _classify(status, encode(ERROR_RESPONSE))

        assert excinfo.value.code == ERROR_RESPONSE["code"]
        assert excinfo.value.text == ERROR_RESPONSE["text"]

    def test_malformed_error_body_is_unexpected(self):
        with pytest.raises(UnexpectedResponseError) as excinfo:
            _classify(400, b"<html>Bad Request</html>")

        assert excinfo.value.raw_body == b"<html>Bad Request</html>"

    def test_error_body_missing_text_is_unexpected(self):
        with pytest.raises(UnexpectedResponseError):
            _classify(403, encode({"code": "forbidden"}))


class TestNotFound:
    def test_carries_request_url(self):
        with pytest.raises(NotFoundError) as excinfo:
            _classify(404, b"")

        assert excinfo.value.url == URL


class TestUnauthorized:
    def test_carries_credentials(self):
        with pytest.raises(UnauthorizedError) as excinfo:
            _classify(401, b"")

        assert excinfo.value.service_plan_id == SERVICE_PLAN_ID
        assert excinfo.value.token == TOKEN

    def test_message_does_not_contain_raw_token(self):
        with pytest.raises(UnauthorizedError) as excinfo:
            _classify(401, b"")

        assert TOKEN not in str(excinfo.value)
        assert SERVICE_PLAN_ID in str(excinfo.value)


class TestUnexpected:
    """Every status outside the known set falls through to the catch-all."""

    @pytest.mark.parametrize("status", [100, 202, 204, 301, 402, 409, 429, 500, 503, 999])
    def test_raw_body_preserved(self, status):
        body = b"\x00not json at all\xff"
        with pytest.raises(UnexpectedResponseError) as excinfo:
            _classify(status, body)

        assert excinfo.value.raw_body == body
        assert str(status) in excinfo.value.message
