"""In-memory and file-backed history source for offline runs and tests."""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..config.defaults import FetchParams
from ..data.models import PricePoint
from ..data.parsers import ParseError, parse_history_payload, parse_history_rows, parse_json_payload
from .base import FetchPermanentError, MarketDataSource


class StaticHistorySource(MarketDataSource):
    """
    Serves pre-loaded histories.

    The stored series is returned as-is regardless of the lookback, so a
    snapshot file reproduces the same report on every run. Symbols absent
    from the snapshot resolve to an empty series.
    """

    def __init__(self, histories: Mapping[str, list[PricePoint]],
                 params: Optional[FetchParams] = None, name: str = "static"):
        super().__init__(name, params)
        self.histories = dict(histories)

    @classmethod
    def from_json(cls, raw: Union[str, bytes], params: Optional[FetchParams] = None) -> "StaticHistorySource":
        """
        Build a source from a JSON snapshot.

        Accepted shape: ``{symbol: [{"date", "close"}, ...]}``; each value may
        also be a historical-data response object ``{"data": [...]}``.

        Raises:
            ParseError: If the snapshot is not valid JSON or rows are malformed
        """
        document = parse_json_payload(raw)
        if not isinstance(document, dict):
            raise ParseError(f"History snapshot must be an object, got {type(document).__name__}")

        histories: dict[str, list[PricePoint]] = {}
        for symbol, value in document.items():
            histories[symbol] = _parse_snapshot_entry(value, symbol)
        return cls(histories, params)

    @classmethod
    def from_json_file(cls, path: Union[str, Path], params: Optional[FetchParams] = None) -> "StaticHistorySource":
        """Build a source from a JSON snapshot on disk."""
        with open(path, "rb") as f:
            return cls.from_json(f.read(), params)

    def fetch_history(self, symbol: str, lookback_days: int) -> list[PricePoint]:
        if symbol not in self.histories:
            raise FetchPermanentError(f"No history for {symbol} in snapshot", symbol=symbol)
        return list(self.histories[symbol])


def _parse_snapshot_entry(value: Any, symbol: str) -> list[PricePoint]:
    if isinstance(value, dict):
        return parse_history_payload(value, symbol)
    return parse_history_rows(value, symbol)
