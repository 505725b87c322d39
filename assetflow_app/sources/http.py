"""Shared HTTP GET handling for JSON history endpoints."""

import socket
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config.defaults import FetchParams
from ..data.parsers import ParseError, parse_json_payload
from .base import FetchPermanentError, FetchRetryableError, MarketDataSource


class HttpHistorySource(MarketDataSource):
    """Market data source that reads JSON history over HTTP GET."""

    def __init__(self, name: str, base_url: str, params: Optional[FetchParams] = None):
        super().__init__(name, params)
        self.base_url = base_url.rstrip("/")

        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise FetchPermanentError(f"Invalid URL: {base_url}")

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.params.user_agent,
            "Accept": "application/json",
        }

    def _get_json(self, url: str, symbol: str) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            FetchRetryableError: On network errors, timeouts and 5xx responses
            FetchPermanentError: On other non-2xx responses and undecodable bodies
        """
        req = Request(url, headers=self._headers(), method="GET")

        try:
            with urlopen(req, timeout=self.params.timeout_seconds) as response:
                response_code = response.getcode()
                body = response.read()

        except HTTPError as e:
            error_msg = f"HTTP {e.code}: {e.reason}"
            if e.code >= 500:
                raise FetchRetryableError(error_msg, symbol=symbol, status_code=e.code) from e
            raise FetchPermanentError(error_msg, symbol=symbol, status_code=e.code) from e

        except URLError as e:
            raise FetchRetryableError(f"Network error: {e.reason}", symbol=symbol) from e

        except socket.timeout as e:
            raise FetchRetryableError(f"Request timeout: {e}", symbol=symbol) from e

        if response_code >= 500:
            raise FetchRetryableError(f"HTTP {response_code}", symbol=symbol, status_code=response_code)
        if not 200 <= response_code < 300:
            raise FetchPermanentError(f"HTTP {response_code}", symbol=symbol, status_code=response_code)

        try:
            return parse_json_payload(body)
        except ParseError as e:
            raise FetchPermanentError(str(e), symbol=symbol, status_code=response_code) from e
