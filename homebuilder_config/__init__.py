"""
homebuilder_config -- single public entrypoint for analytics configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a validated, frozen ``AnalyticsConfig``.

Architecture position:
    Configuration -- sits above ``homebuilder_kernel`` and below
    ``homebuilder_services``.  Engines never import from this package; the
    orchestrator translates config values into engine parameters.

Failure modes:
    - ``FileNotFoundError`` -- the requested YAML file does not exist.
    - ``ValueError`` -- parse or validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``HOMEBUILDER_CONFIG_TRACE`` log entry with the config id, version and
    checksum, so each persisted snapshot can be tied to the configuration
    that produced it.
"""

from __future__ import annotations

from pathlib import Path

from homebuilder_config.loader import load_yaml_file, parse_analytics_config
from homebuilder_config.schema import (
    AnalyticsConfig,
    CapacityConfig,
    ForecastConfig,
    IOConfig,
    PlaceholderConfig,
    RiskWeightsConfig,
)
from homebuilder_config.validator import validate_configuration
from homebuilder_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "analytics.yaml"


def get_active_config(config_path: Path | None = None) -> AnalyticsConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to an analytics YAML file.  Defaults to
            the packaged ``defaults/analytics.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the configuration fails parsing or validation.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_analytics_config(load_yaml_file(path))

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )

    _logger.info(
        "HOMEBUILDER_CONFIG_TRACE",
        extra={
            "trace_type": "HOMEBUILDER_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path),
            "parallel_extractors": config.parallel_extractors,
        },
    )
    return config


__all__ = [
    "AnalyticsConfig",
    "CapacityConfig",
    "DEFAULT_CONFIG_PATH",
    "ForecastConfig",
    "IOConfig",
    "PlaceholderConfig",
    "RiskWeightsConfig",
    "get_active_config",
]
