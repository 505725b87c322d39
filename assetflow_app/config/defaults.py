"""Default configuration parameters for the correlation and flow engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchParams:
    """Market data fetch parameters."""
    timeout_seconds: int = 10                       # Per-request socket timeout
    max_workers: int = 8                            # Concurrent fetches per batch
    retry_attempts: int = 2                         # Retries after the first attempt
    retry_delay_seconds: float = 0.5                # Pause between retries
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    chart_base_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    proxy_base_url: str = "http://localhost:3000"   # Internal historical-data endpoint host


@dataclass(frozen=True)
class CorrelationParams:
    """Correlation matrix parameters."""
    lookback_days: int = 90          # Calendar days requested upstream
    min_observations: int = 30       # Points required to enter the matrix


@dataclass(frozen=True)
class FlowParams:
    """Asset flow parameters."""
    lookback_days: int = 45          # Enough calendar days for 22 trading sessions


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    fetch: FetchParams
    correlation: CorrelationParams
    flows: FlowParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        fetch=FetchParams(),
        correlation=CorrelationParams(),
        flows=FlowParams(),
        logging=LoggingParams(),
    )
