"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_fetch_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate fetch parameters."""
        errors = []

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_workers" in params:
            value = params["max_workers"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="max_workers",
                    message="Must be a positive integer",
                    value=value
                ))

        if "retry_attempts" in params:
            value = params["retry_attempts"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="retry_attempts",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "retry_delay_seconds" in params:
            value = params["retry_delay_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="retry_delay_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        for url_field in ("chart_base_url", "proxy_base_url"):
            if url_field in params:
                value = params[url_field]
                if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                    errors.append(ValidationError(
                        field=url_field,
                        message="Must be an http(s) URL",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_correlation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate correlation parameters."""
        errors = []

        if "lookback_days" in params:
            value = params["lookback_days"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="lookback_days",
                    message="Must be a positive integer",
                    value=value
                ))

        # Pearson needs at least two returns, i.e. three prices
        if "min_observations" in params:
            value = params["min_observations"]
            if not _is_int(value) or value < 3:
                errors.append(ValidationError(
                    field="min_observations",
                    message="Must be an integer of at least 3",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_flow_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate flow parameters."""
        errors = []

        if "lookback_days" in params:
            value = params["lookback_days"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="lookback_days",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(_LOG_LEVELS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "fetch" in config:
            errors.extend(ConfigValidator.validate_fetch_params(config["fetch"]))

        if "correlation" in config:
            errors.extend(ConfigValidator.validate_correlation_params(config["correlation"]))

        if "flows" in config:
            errors.extend(ConfigValidator.validate_flow_params(config["flows"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
