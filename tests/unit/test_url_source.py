#!/usr/bin/env python3
"""
Unit tests for the URL source
HTTP retrieval, error mapping, JSON normalization
"""

import pytest
import requests
import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from linked.adapter import Adapter
from linked.config import AdapterConfig
from linked.errors import FetchError, SourceConfigError
from linked.url_source import UrlSource


def make_response(status_code=200, text="[]", reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.reason = reason
    return response


class TestUrlSourceInit:
    """Test URL source configuration."""

    def test_defaults(self):
        source = UrlSource(url="https://data.example.com/assoc")

        assert source.url == "https://data.example.com/assoc"
        assert source.timeout == UrlSource.DEFAULT_TIMEOUT
        assert source._request_count == 0

    def test_explicit_zero_timeout_kept(self):
        """Test: timeout=0 is respected, not replaced by the default."""
        source = UrlSource(url="https://data.example.com/assoc", timeout=0)
        assert source.timeout == 0

    def test_from_config(self):
        source = UrlSource.from_config(AdapterConfig(url="https://data.example.com/ld", timeout_sec=5))

        assert source.url == "https://data.example.com/ld"
        assert source.timeout == 5

    def test_cache_key_is_url(self):
        source = UrlSource(url="https://data.example.com/assoc")
        assert source.get_cache_key({}) == "https://data.example.com/assoc"


class TestUrlSourceRequests:
    """Test retrieval through requests."""

    @pytest.mark.asyncio
    async def test_requires_url(self):
        source = UrlSource()
        with pytest.raises(SourceConfigError, match="must specify a resource URL"):
            await source.perform_request({})

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_returns_text(self, mock_get):
        mock_get.return_value = make_response(text='[{"id": 1}]')
        source = UrlSource(url="https://data.example.com/assoc", timeout=7)

        text = await source.perform_request({})

        assert text == '[{"id": 1}]'
        mock_get.assert_called_once_with("https://data.example.com/assoc", timeout=7)
        assert source._request_count == 1

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_http_error_raises(self, mock_get):
        mock_get.return_value = make_response(status_code=503, text="down", reason="Service Unavailable")
        source = UrlSource(url="https://data.example.com/assoc")

        with pytest.raises(FetchError, match="503") as excinfo:
            await source.perform_request({})

        assert excinfo.value.status_code == 503
        assert source._error_count == 1

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_timeout_raises(self, mock_get):
        mock_get.side_effect = requests.Timeout()
        source = UrlSource(url="https://data.example.com/assoc", timeout=1)

        with pytest.raises(FetchError, match="Timed out"):
            await source.perform_request({})

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_connection_error_raises(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        source = UrlSource(url="https://data.example.com/assoc")

        with pytest.raises(FetchError, match="Unable to fetch"):
            await source.perform_request({})


class TestUrlSourceNormalize:
    """Test response parsing."""

    def test_parses_json_text(self):
        source = UrlSource()
        assert source.normalize_response('[{"id": 1}]', {}) == [{"id": 1}]

    def test_passes_objects_through(self):
        source = UrlSource()
        payload = [{"id": 1}]
        assert source.normalize_response(payload, {}) is payload


class TestUrlAdapter:
    """Test UrlSource composed with Adapter."""

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_fetch_is_memoized_by_url(self, mock_get):
        mock_get.return_value = make_response(text='[{"id": 1, "score": 0.5}]')
        adapter = Adapter(UrlSource(url="https://data.example.com/assoc"))

        first = await adapter.fetch({})
        first[0]["score"] = 99
        second = await adapter.fetch({})

        assert second == [{"id": 1, "score": 0.5}]
        assert mock_get.call_count == 1

    @pytest.mark.asyncio
    @patch("linked.url_source.requests.get")
    async def test_failed_fetch_not_cached(self, mock_get):
        mock_get.side_effect = [
            make_response(status_code=500, text="boom", reason="Internal Server Error"),
            make_response(text='{"ok": true}'),
        ]
        adapter = Adapter(UrlSource(url="https://data.example.com/assoc"))

        with pytest.raises(FetchError):
            await adapter.fetch({})

        assert await adapter.fetch({}) == {"ok": True}
        assert mock_get.call_count == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
