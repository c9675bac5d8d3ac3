"""Tests for the stateless request helper."""

from unittest.mock import MagicMock, patch

import pytest

from httpkit import FileUpload, TransportResult, simple
from httpkit.transport import CurlTransport


class TestSimpleRequest:
    """Tests for simple.request."""

    def test_invalid_url(self, mock_transport):
        """Test malformed URL gives 400."""
        result = simple.request("nope", transport=mock_transport)

        assert result == {"status_code": 400, "response": "Invalid URL -> nope"}
        mock_transport.send.assert_not_called()

    def test_method_not_allowed(self, mock_transport):
        """Test unsupported verb gives 400."""
        result = simple.request("https://example.com", "PATCH", transport=mock_transport)

        assert result == {"status_code": 400, "response": "Method not allowed -> PATCH"}

    def test_lowercase_method_not_allowed(self, mock_transport):
        """Test verbs are matched exactly."""
        result = simple.request("https://example.com", "post", transport=mock_transport)

        assert result == {"status_code": 400, "response": "Method not allowed -> post"}
        mock_transport.send.assert_not_called()

    def test_invalid_json(self, mock_transport):
        """Test JSON bodies with non-finite floats are rejected."""
        result = simple.request(
            "https://example.com",
            "POST",
            ["Content-Type: application/json"],
            {"x": float("inf")},
            transport=mock_transport,
        )

        assert result == {"status_code": 400, "response": "Invalid body for application/json"}
        mock_transport.send.assert_not_called()

    def test_redirect_returned_as_is(self, mock_transport):
        """Test 3xx responses are returned without following them."""
        mock_transport.send.return_value = TransportResult(302, b"")
        result = simple.request("https://example.com", transport=mock_transport)

        assert result == {"status_code": 302, "response": b""}
        assert mock_transport.send.call_args.kwargs["max_redirects"] == 0

    def test_invalid_xml(self, mock_transport):
        """Test XML content type needs an XML declaration."""
        result = simple.request(
            "https://example.com",
            "POST",
            ["Content-Type: application/xml"],
            "<a/>",
            transport=mock_transport,
        )

        assert result == {"status_code": 400, "response": "Invalid body for application/xml"}

    def test_success(self, mock_transport):
        """Test response status and body are returned."""
        result = simple.request("http://example.com", transport=mock_transport)

        assert result == {"status_code": 200, "response": b'{"success": true}'}

    def test_tls_off_and_json_body(self, mock_transport):
        """Test body encoding follows headers and TLS is not verified."""
        simple.request(
            "https://example.com",
            "POST",
            ["Content-Type: application/json"],
            {"a": 1},
            transport=mock_transport,
        )

        args, kwargs = mock_transport.send.call_args
        assert args == ("POST", "https://example.com", ["Content-Type: application/json"], '{"a":1}')
        assert kwargs == {"verify_ssl": False, "max_redirects": 0}

    def test_file_upload(self, mock_transport):
        """Test file uploads drop Content-Type and keep the mapping."""
        body = {"f": FileUpload(data=b"x")}
        simple.request(
            "https://example.com",
            "POST",
            ["Content-Type: application/json", "Accept: text/plain"],
            body,
            transport=mock_transport,
        )

        args, _ = mock_transport.send.call_args
        assert args[2] == ["Accept: text/plain"]
        assert args[3] is body

    def test_transport_error(self, mock_transport, connection_error_result):
        """Test transport failure gives 500 with the error."""
        mock_transport.send.return_value = connection_error_result
        result = simple.request("https://example.com", transport=mock_transport)

        assert result["status_code"] == 500
        assert result["response"].startswith("Request error -> Request failed")

    def test_owned_transport_closed(self, json_result):
        """Test a temporary transport is created and closed."""
        with patch("httpkit.simple.CurlTransport") as transport_cls:
            transport = MagicMock(spec=CurlTransport)
            transport.send.return_value = json_result
            transport_cls.return_value = transport

            simple.request("https://example.com")

            transport.close.assert_called_once()

    @pytest.mark.parametrize("status", [404, 500])
    def test_http_errors_passed_through(self, mock_transport, status):
        """Test server error statuses are not rewritten."""
        mock_transport.send.return_value = TransportResult(status, b"err")
        result = simple.request("https://example.com", transport=mock_transport)

        assert result == {"status_code": status, "response": b"err"}
