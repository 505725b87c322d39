"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import ConfigurationError
from .defaults import (
    CorrelationParams,
    DefaultConfig,
    FetchParams,
    FlowParams,
    LoggingParams,
    get_default_config,
)
from .validation import ConfigValidator


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Union[str, Path]] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_source_config(self, source_name: str) -> dict[str, Any]:
        """Load source-specific configuration overrides."""
        sources_file = self.config_dir / "sources.yaml"

        if not sources_file.exists():
            return {}

        with open(sources_file) as f:
            sources_config = yaml.safe_load(f) or {}

        return sources_config.get("sources", {}).get(source_name, {})  # type: ignore[no-any-return]

    def merge_config(
        self,
        source_name: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Source-specific overrides from sources.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        source_config = self.load_source_config(source_name)
        config = self._deep_merge(config, source_config)

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(
        self,
        source_name: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """
        Merge, validate and materialize configuration as frozen dataclasses.

        Raises:
            ConfigurationError: If the merged configuration fails validation
        """
        config = self.merge_config(source_name, overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            raise ConfigurationError(
                f"Invalid configuration for source '{source_name}': {len(errors)} error(s)",
                errors=errors
            )

        return config_from_dict(config)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def config_from_dict(config: dict[str, Any]) -> DefaultConfig:
    """Build a DefaultConfig from a merged configuration dictionary.

    Unknown keys are ignored so that YAML files may carry extra sections.
    """
    def pick(params_cls: type, section: str) -> Any:
        values = config.get(section, {}) or {}
        known = {k: v for k, v in values.items() if k in params_cls.__dataclass_fields__}
        return params_cls(**known)

    return DefaultConfig(
        fetch=pick(FetchParams, "fetch"),
        correlation=pick(CorrelationParams, "correlation"),
        flows=pick(FlowParams, "flows"),
        logging=pick(LoggingParams, "logging"),
    )
