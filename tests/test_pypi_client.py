"""Tests for the index client and the shared HTTP helpers."""
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from common.errors import NotFound, TransportError
from common.http_client import get_bytes, safe_get
from registry.pypi.client import fetch_bytes, fetch_index, normalize_name

from archive_builders import index_document


def _response(status=200, text="", chunks=(), headers=None):
    res = MagicMock()
    res.status_code = status
    res.text = text
    res.headers = headers or {}
    res.iter_content.return_value = list(chunks)
    return res


class TestNormalizeName:
    """Project names are validated and canonicalized."""

    def test_canonical_form(self):
        assert normalize_name("Flask_RESTful") == "flask-restful"
        assert normalize_name("  zope.interface ") == "zope-interface"

    @pytest.mark.parametrize("name", ["", "-leading", "has space", "bad/slash", None])
    def test_invalid_names(self, name):
        with pytest.raises(NotFound):
            normalize_name(name)


class TestFetchIndex:
    """HTTP outcomes map onto the error taxonomy."""

    def test_success(self):
        document = index_document(["1.0"])
        with patch("registry.pypi.client.safe_get", return_value=_response(text=json.dumps(document))) as get:
            assert fetch_index("Demo", url="https://index.example.org/pypi") == document
        assert get.call_args[0][0] == "https://index.example.org/pypi/demo/json"

    def test_not_found(self):
        with patch("registry.pypi.client.safe_get", return_value=_response(status=404)):
            with pytest.raises(NotFound):
                fetch_index("missing")

    def test_server_error(self):
        with patch("registry.pypi.client.safe_get", return_value=_response(status=503)):
            with pytest.raises(TransportError):
                fetch_index("demo")

    def test_invalid_json(self):
        with patch("registry.pypi.client.safe_get", return_value=_response(text="<html>")):
            with pytest.raises(TransportError):
                fetch_index("demo")

    def test_document_without_info(self):
        with patch("registry.pypi.client.safe_get", return_value=_response(text="[]")):
            with pytest.raises(TransportError):
                fetch_index("demo")

    def test_invalid_name_is_not_fetched(self):
        with patch("registry.pypi.client.safe_get") as get:
            with pytest.raises(NotFound):
                fetch_index("not a name")
        get.assert_not_called()


class TestHttpHelpers:
    """Transport failures and archive size limits."""

    def test_timeout(self):
        with patch("common.http_client.requests.get", side_effect=requests.Timeout("slow")):
            with pytest.raises(TransportError) as excinfo:
                safe_get("https://index.example.org/x", context="index")
        assert "timed out" in str(excinfo.value)

    def test_connection_error(self):
        with patch("common.http_client.requests.get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(TransportError):
                safe_get("https://index.example.org/x", context="index")

    def test_non_200_status_is_returned(self):
        with patch("common.http_client.requests.get", return_value=_response(status=404)):
            assert safe_get("https://index.example.org/x", context="index").status_code == 404

    def test_get_bytes(self):
        res = _response(chunks=[b"abc", b"def"])
        with patch("common.http_client.requests.get", return_value=res):
            assert get_bytes("https://files.example.org/a.whl", context="archive") == b"abcdef"
        res.close.assert_called_once()

    def test_get_bytes_non_200(self):
        with patch("common.http_client.requests.get", return_value=_response(status=403)):
            with pytest.raises(TransportError):
                get_bytes("https://files.example.org/a.whl", context="archive")

    def test_declared_length_over_limit(self):
        res = _response(headers={"Content-Length": "100"}, chunks=[b"x"])
        with patch("common.http_client.requests.get", return_value=res):
            with pytest.raises(TransportError):
                get_bytes("https://files.example.org/a.whl", context="archive", limit=10)

    def test_streamed_body_over_limit(self):
        res = _response(chunks=[b"x" * 8, b"x" * 8])
        with patch("common.http_client.requests.get", return_value=res):
            with pytest.raises(TransportError):
                get_bytes("https://files.example.org/a.whl", context="archive", limit=10)

    def test_fetch_bytes_delegates(self):
        with patch("registry.pypi.client.get_bytes", return_value=b"zip") as get:
            assert fetch_bytes("https://files.example.org/a.whl") == b"zip"
        assert get.call_args.kwargs["context"] == "archive"
