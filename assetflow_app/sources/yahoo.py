"""Public chart endpoint source."""

from datetime import datetime
from typing import Callable, Optional
from urllib.parse import quote, urlencode

from ..config.defaults import FetchParams
from ..config.universe import get_provider_symbol
from ..data.models import PricePoint
from ..data.parsers import ParseError, parse_chart_payload
from ..utils.time import lookback_window, utc_now
from .base import FetchPermanentError
from .http import HttpHistorySource


class YahooChartSource(HttpHistorySource):
    """
    Reads daily closes from the v8 chart endpoint.

    Internal futures symbols are mapped to provider symbols before the
    request; the window ends at the current time.
    """

    def __init__(self, params: Optional[FetchParams] = None,
                 clock: Callable[[], datetime] = utc_now):
        params = params or FetchParams()
        super().__init__("yahoo", params.chart_base_url, params)
        self.clock = clock

    def build_url(self, symbol: str, lookback_days: int) -> str:
        period_start, period_end = lookback_window(lookback_days, end=self.clock())
        query = urlencode({
            "period1": period_start,
            "period2": period_end,
            "interval": "1d",
        })
        provider_symbol = quote(get_provider_symbol(symbol), safe="")
        return f"{self.base_url}/{provider_symbol}?{query}"

    def fetch_history(self, symbol: str, lookback_days: int) -> list[PricePoint]:
        payload = self._get_json(self.build_url(symbol, lookback_days), symbol)
        try:
            return parse_chart_payload(payload, symbol)
        except ParseError as e:
            raise FetchPermanentError(str(e), symbol=symbol) from e
