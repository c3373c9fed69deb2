"""
Unit tests for src/xms_client/transport.py.

Covers the fixed header set, body handling, exchange logging and
observer callbacks, failure wrapping, and session lifecycle.
"""

from __future__ import annotations

import logging
import platform
from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import TOKEN, make_response, sent_request
from xms_client.config import SDK_VERSION
from xms_client.errors import TransportError
from xms_client.transport import (
    RequestDescriptor,
    Transport,
    build_headers,
    build_user_agent,
)

URL = "https://xms.example.com/xms/v1/my-plan/batches"


@pytest.fixture
def transport(endpoint_config, session):
    with Transport(endpoint_config, timeout=7, session=session) as t:
        yield t


class TestHeaders:
    def test_fixed_headers_without_body(self):
        headers = build_headers(TOKEN, has_body=False, user_agent="ua")
        assert headers == {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Authorization": f"Bearer {TOKEN}",
            "X-CLX-SDK-Version": SDK_VERSION,
            "User-Agent": "ua",
        }

    def test_content_type_only_with_body(self):
        headers = build_headers(TOKEN, has_body=True, user_agent="ua")
        assert headers["Content-Type"] == "application/json"

    def test_user_agent_names_library_and_runtime(self):
        ua = build_user_agent()
        assert ua == f"python-requests/{requests.__version__} Python/{platform.python_version()}"


class TestExecute:
    def test_get_without_body(self, transport, session):
        session.request.return_value = make_response(200, b'{"ok":1}')

        status, body = transport.execute(RequestDescriptor("GET", URL))

        assert (status, body) == (200, b'{"ok":1}')
        method, url, data, headers = sent_request(session)
        assert (method, url, data) == ("GET", URL, None)
        assert "Content-Type" not in headers
        assert session.request.call_args.kwargs["timeout"] == 7

    def test_post_with_body(self, transport, session):
        session.request.return_value = make_response(201, b"{}")

        transport.execute(RequestDescriptor("POST", URL, b'{"a":1}'))

        method, _, data, headers = sent_request(session)
        assert method == "POST"
        assert data == b'{"a":1}'
        assert headers["Content-Type"] == "application/json"

    def test_status_not_interpreted(self, transport, session):
        session.request.return_value = make_response(500, b"boom")
        assert transport.execute(RequestDescriptor("DELETE", URL)) == (500, b"boom")

    def test_unsupported_method_rejected(self):
        with pytest.raises(ValueError):
            RequestDescriptor("PATCH", URL)


class TestFailures:
    @pytest.mark.parametrize("exc", [
        requests.ConnectionError("connection reset"),
        requests.Timeout("timed out"),
    ])
    def test_request_exception_wrapped(self, transport, session, exc):
        session.request.side_effect = exc

        with pytest.raises(TransportError) as excinfo:
            transport.execute(RequestDescriptor("GET", URL))

        assert excinfo.value.__cause__ is exc

    def test_no_log_or_observer_on_failure(self, endpoint_config, session, caplog):
        observer = MagicMock()
        session.request.side_effect = requests.ConnectionError("dns")
        transport = Transport(endpoint_config, session=session, on_exchange=observer)

        with caplog.at_level(logging.DEBUG, logger="xms_client.transport"):
            with pytest.raises(TransportError):
                transport.execute(RequestDescriptor("GET", URL))

        assert caplog.records == []
        observer.assert_not_called()


class TestExchangeRecording:
    def test_debug_record_per_exchange(self, transport, session, caplog):
        session.request.return_value = make_response(201, b'{"id":"x"}')

        with caplog.at_level(logging.DEBUG, logger="xms_client.transport"):
            transport.execute(RequestDescriptor("POST", URL, b'{"a":1}'))

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.DEBUG
        assert record.request_body == b'{"a":1}'
        assert record.response_body == b'{"id":"x"}'
        assert record.status == 201
        assert record.elapsed >= 0

    def test_injected_logger_used(self, endpoint_config, session):
        logger = MagicMock(spec=logging.Logger)
        logger.isEnabledFor.return_value = True
        transport = Transport(endpoint_config, session=session, logger=logger)

        transport.execute(RequestDescriptor("GET", URL))

        logger.debug.assert_called_once()

    def test_observer_receives_exchange(self, endpoint_config, session):
        seen = []
        session.request.return_value = make_response(404, b"")
        transport = Transport(endpoint_config, session=session, on_exchange=seen.append)

        transport.execute(RequestDescriptor("GET", URL))

        assert len(seen) == 1
        assert seen[0].status == 404
        assert seen[0].url == URL
        assert seen[0].method == "GET"


class TestLifecycle:
    @patch("xms_client.transport.requests.Session")
    def test_close_releases_owned_session_once(self, session_cls, endpoint_config):
        transport = Transport(endpoint_config)
        transport.close()
        transport.close()

        session_cls.return_value.close.assert_called_once()
        assert transport.closed

    def test_injected_session_left_open(self, endpoint_config, session):
        transport = Transport(endpoint_config, session=session)
        transport.close()

        session.close.assert_not_called()
        assert transport.closed

    def test_execute_after_close_fails(self, endpoint_config, session):
        transport = Transport(endpoint_config, session=session)
        transport.close()

        with pytest.raises(TransportError):
            transport.execute(RequestDescriptor("GET", URL))
        session.request.assert_not_called()

    @patch("xms_client.transport.requests.Session")
    def test_context_manager_closes_on_error(self, session_cls, endpoint_config):
        with pytest.raises(RuntimeError):
            with Transport(endpoint_config) as transport:
                raise RuntimeError("caller failure")

        session_cls.return_value.close.assert_called_once()
        assert transport.closed

    def test_same_session_reused_across_calls(self, transport, session):
        transport.execute(RequestDescriptor("GET", URL))
        transport.execute(RequestDescriptor("GET", URL))
        assert session.request.call_count == 2
