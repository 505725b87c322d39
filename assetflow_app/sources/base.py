"""Base classes for market data sources."""

import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Iterable, Optional

import structlog

from ..config.defaults import FetchParams
from ..data.models import InstrumentSeries, PricePoint
from ..errors import MarketDataFetchError


class FetchError(MarketDataFetchError):
    """Base exception for history fetch errors."""
    pass


class FetchRetryableError(FetchError):
    """Transient fetch error worth retrying (network failure, 5xx)."""
    pass


class FetchPermanentError(FetchError):
    """Fetch error that should not be retried (4xx, malformed payload, unknown symbol)."""
    pass


class MarketDataSource(ABC):
    """
    Base class for price history providers.

    Subclasses implement ``fetch_history`` for a single symbol and may raise.
    ``fetch_universe`` fans out over a thread pool and never raises: a symbol
    that cannot be fetched resolves to an empty series.
    """

    def __init__(self, name: str, params: Optional[FetchParams] = None):
        self.name = name
        self.params = params or FetchParams()
        self.logger = structlog.get_logger(f"source.{name}")
        self._fetch_count = 0
        self._error_count = 0
        self._stats_lock = threading.Lock()

    @abstractmethod
    def fetch_history(self, symbol: str, lookback_days: int) -> list[PricePoint]:
        """
        Fetch daily closes for one symbol.

        Args:
            symbol: Internal instrument symbol, e.g. "/ES"
            lookback_days: Calendar days of history requested

        Returns:
            Ascending list of price points

        Raises:
            FetchRetryableError: On transient failures
            FetchPermanentError: On failures that will not resolve by retrying
        """
        pass

    def fetch_with_retry(self, symbol: str, lookback_days: int) -> list[PricePoint]:
        """
        Fetch one symbol, retrying transient failures.

        Returns:
            The series, or an empty list once retries are exhausted or a
            permanent error occurs
        """
        max_retries = self.params.retry_attempts
        attempt = 0
        last_error: Optional[Exception] = None

        while attempt <= max_retries:
            try:
                points = self.fetch_history(symbol, lookback_days)
                self._record(success=True)
                self.logger.debug(
                    "Fetched price history",
                    source=self.name,
                    symbol=symbol,
                    points=len(points),
                    attempt=attempt + 1
                )
                return points

            except FetchPermanentError as e:
                self._record(success=False)
                self.logger.warning(
                    "Permanent fetch error, treating as empty history",
                    source=self.name,
                    symbol=symbol,
                    error=str(e),
                    status_code=e.status_code
                )
                return []

            except FetchRetryableError as e:
                last_error = e

            except Exception as e:
                # Unknown error - treat as retryable
                last_error = e

            attempt += 1

            if attempt <= max_retries:
                self.logger.warning(
                    f"Fetch attempt {attempt} failed, retrying in {self.params.retry_delay_seconds}s",
                    source=self.name,
                    symbol=symbol,
                    error=str(last_error)
                )
                time.sleep(self.params.retry_delay_seconds)

        self._record(success=False)
        self.logger.warning(
            "Max retries exceeded, treating as empty history",
            source=self.name,
            symbol=symbol,
            attempts=attempt,
            error=str(last_error)
        )
        return []

    def fetch_universe(self, symbols: Iterable[str], lookback_days: int) -> InstrumentSeries:
        """
        Fetch every symbol concurrently and join.

        One task per symbol; there is no ordering requirement between fetches
        and one failing symbol never affects the others.

        Args:
            symbols: Symbols to fetch
            lookback_days: Calendar days of history requested

        Returns:
            symbol -> series in the order given, empty for failed symbols
        """
        symbols = list(symbols)
        if not symbols:
            return {}

        start_time = time.time()
        results: dict[str, list[PricePoint]] = {}
        workers = max(1, min(self.params.max_workers, len(symbols)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.fetch_with_retry, symbol, lookback_days): symbol
                for symbol in symbols
            }

            for future in as_completed(futures):
                symbol = futures[future]
                try:
                    results[symbol] = future.result()
                except Exception as e:
                    self.logger.error(
                        "Unexpected error fetching history",
                        source=self.name,
                        symbol=symbol,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    results[symbol] = []

        fetched = sum(1 for points in results.values() if points)
        self.logger.info(
            "Fetched universe history",
            source=self.name,
            fetched=fetched,
            requested=len(symbols),
            lookback_days=lookback_days,
            elapsed_ms=int((time.time() - start_time) * 1000)
        )

        return {symbol: results[symbol] for symbol in symbols}

    def _record(self, success: bool) -> None:
        # Called from pool workers
        with self._stats_lock:
            if success:
                self._fetch_count += 1
            else:
                self._error_count += 1

    def get_stats(self) -> dict[str, Any]:
        """Get fetch statistics."""
        with self._stats_lock:
            fetch_count, error_count = self._fetch_count, self._error_count
        return {
            "name": self.name,
            "fetch_count": fetch_count,
            "error_count": error_count,
            "success_rate": (
                fetch_count / (fetch_count + error_count)
                if (fetch_count + error_count) > 0 else 0.0
            )
        }

    def reset_stats(self) -> None:
        """Reset fetch statistics."""
        with self._stats_lock:
            self._fetch_count = 0
            self._error_count = 0
