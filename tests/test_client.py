"""Tests for the default schema client (httpx for http/https, files from disk)."""

import json
from unittest.mock import patch

import httpx
import pytest

from jsonvalidator.errors import SchemaError, SchemaFetchError
from jsonvalidator.loader.client import DefaultSchemaClient, load_json
from jsonvalidator.loader.loader import load_schema


def _mock_http(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestHttp:
    def test_returns_response_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"type": "string"})

        client = DefaultSchemaClient(http_client=_mock_http(handler))
        with client.get("https://schemas.example.com/s.json") as stream:
            assert json.loads(stream.read()) == {"type": "string"}
        assert seen == ["https://schemas.example.com/s.json"]

    def test_http_error_status_becomes_fetch_error(self):
        client = DefaultSchemaClient(http_client=_mock_http(lambda request: httpx.Response(404)))
        with pytest.raises(SchemaFetchError) as exc_info:
            client.get("http://schemas.example.com/missing.json")
        error = exc_info.value
        assert error.code == "SCHEMA_FETCH_ERROR"
        assert error.url == "http://schemas.example.com/missing.json"
        assert str(error).startswith("failed to fetch [http://schemas.example.com/missing.json]")

    def test_transport_error_becomes_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = DefaultSchemaClient(http_client=_mock_http(handler))
        with pytest.raises(SchemaFetchError, match="connection refused"):
            client.get("http://schemas.example.com/s.json")

    def test_module_level_get_uses_configured_options(self):
        response = httpx.Response(200, content=b"{}", request=httpx.Request("GET", "http://x.org/s.json"))
        with patch("jsonvalidator.loader.client.httpx.get", return_value=response) as mock_get:
            DefaultSchemaClient(timeout=3.0, follow_redirects=False).get("http://x.org/s.json")
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == 3.0
        assert kwargs["follow_redirects"] is False
        assert kwargs["headers"]["User-Agent"].startswith("jsonvalidator/")

    def test_remote_reference_loaded_through_http(self):
        client = DefaultSchemaClient(
            http_client=_mock_http(lambda request: httpx.Response(200, json={"positive": {"minimum": 1}}))
        )
        schema = load_schema({"$ref": "http://x.org/defs.json#/positive"}, client=client)
        assert schema.is_valid(3)
        assert not schema.is_valid(0)


class TestFiles:
    def test_plain_path_and_file_url(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text('{"type": "null"}')
        client = DefaultSchemaClient()
        for url in (str(path), path.as_uri()):
            with client.get(url) as stream:
                assert json.loads(stream.read()) == {"type": "null"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaFetchError):
            DefaultSchemaClient().get((tmp_path / "nope.json").as_uri())

    def test_unsupported_scheme(self):
        with pytest.raises(SchemaFetchError, match="unsupported URL scheme 'ftp'"):
            DefaultSchemaClient().get("ftp://x.org/s.json")


def test_load_json_reports_parse_errors(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{")
    with pytest.raises(SchemaError, match="Failed to parse JSON text"):
        load_json(path)
