"""
URL Source — fetch JSON records over HTTP

Hooks for Adapter that retrieve one configured URL with requests.
The blocking call runs in a worker thread so the event loop keeps
scheduling other sources meanwhile.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import requests

from .config import AdapterConfig
from .errors import FetchError, SourceConfigError

logger = logging.getLogger(__name__)


class UrlSource:
    """
    Source hooks for a web resource.

    The default cache key is the request URL. Sources that add query or
    segment parameters provide their own get_url.
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None):
        self.url = url
        self.timeout = self.DEFAULT_TIMEOUT if timeout is None else timeout
        self._request_count = 0
        self._error_count = 0

    @classmethod
    def from_config(cls, config: AdapterConfig) -> "UrlSource":
        return cls(url=config.url, timeout=config.timeout_sec)

    def get_url(self, options: Dict[str, Any]) -> Optional[str]:
        return self.url

    def get_cache_key(self, options: Dict[str, Any]) -> Optional[str]:
        return self.get_url(options)

    async def perform_request(self, options: Dict[str, Any]) -> str:
        url = self.get_url(options)
        if not url:
            raise SourceConfigError('Web based resources must specify a resource URL as option "url"')
        return await asyncio.to_thread(self._get, url)

    def _get(self, url: str) -> str:
        self._request_count += 1
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.Timeout as exc:
            self._error_count += 1
            logger.error(f"Source timeout: GET {url} (>{self.timeout}s)")
            raise FetchError(f"Timed out fetching {url}") from exc
        except requests.RequestException as exc:
            self._error_count += 1
            logger.error(f"Source request error: GET {url}: {exc}")
            raise FetchError(f"Unable to fetch {url}: {exc}") from exc

        if response.status_code >= 400:
            self._error_count += 1
            logger.warning(f"Source error: GET {url} -> {response.status_code} {response.text[:200]}")
            raise FetchError(
                f"GET {url} failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        # Keep the raw text so the cached copy holds no mutable references
        return response.text

    def normalize_response(self, raw: Any, options: Dict[str, Any]) -> Any:
        if isinstance(raw, str):
            return json.loads(raw)
        return raw
