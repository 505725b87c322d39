"""Internal historical-data endpoint source."""

from typing import Optional
from urllib.parse import urlencode

from ..config.defaults import FetchParams
from ..data.models import PricePoint
from ..data.parsers import ParseError, parse_history_payload
from ..utils.time import period_label
from .base import FetchPermanentError
from .http import HttpHistorySource


class ProxiedHistorySource(HttpHistorySource):
    """
    Reads ``{"data": [{"date", "close"}]}`` rows from the dashboard's
    ``/api/historical-data`` endpoint, which maps symbols itself.
    """

    def __init__(self, params: Optional[FetchParams] = None, base_url: Optional[str] = None):
        params = params or FetchParams()
        super().__init__("proxy", base_url or params.proxy_base_url, params)

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Cache-Control"] = "no-cache"
        return headers

    def build_url(self, symbol: str, lookback_days: int) -> str:
        query = urlencode({
            "symbol": symbol,
            "period": period_label(lookback_days),
            "interval": "1d",
        })
        return f"{self.base_url}/api/historical-data?{query}"

    def fetch_history(self, symbol: str, lookback_days: int) -> list[PricePoint]:
        payload = self._get_json(self.build_url(symbol, lookback_days), symbol)
        try:
            return parse_history_payload(payload, symbol)
        except ParseError as e:
            raise FetchPermanentError(str(e), symbol=symbol) from e
