"""
Configuration Loader (``homebuilder_config.loader``).

Responsibility
--------------
Loads the analytics YAML document and parses it into the frozen
``homebuilder_config.schema`` dataclasses.  Runtime callers go through
``homebuilder_config.get_active_config()`` instead.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Sections and keys that are absent take the schema defaults.
* Money-like values (floor area, contingency factor) are parsed as
  ``Decimal`` from their string form.
* ``compute_checksum`` is a deterministic SHA-256 over canonical JSON.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from homebuilder_config.schema import (
    AnalyticsConfig,
    CapacityConfig,
    ForecastConfig,
    IOConfig,
    PlaceholderConfig,
    RiskWeightsConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{name}: cannot parse decimal from {value!r}") from exc


def parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name}: expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name}: expected a number, got {value!r}") from exc


def parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name}: expected true or false, got {value!r}")
    return value


def parse_timeout(value: Any, name: str) -> float | None:
    if value is None:
        return None
    return parse_float(value, name)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Section '{key}' must be a mapping, got {type(section).__name__}")
    return section


def _floats(section: dict[str, Any], defaults: Any, prefix: str) -> dict[str, float]:
    return {
        name: parse_float(section.get(name, getattr(defaults, name)), f"{prefix}.{name}")
        for name in defaults.__dataclass_fields__
    }


def parse_analytics_config(data: dict[str, Any]) -> AnalyticsConfig:
    """
    Parse an ``AnalyticsConfig`` from a dict.

    Postconditions:
        - Returns a fully populated frozen ``AnalyticsConfig`` whose
          ``checksum`` is the SHA-256 of ``data``.
    Raises:
        ValueError: if a value has the wrong type.
    """
    capacity_data = _section(data, "capacity")
    forecast_data = _section(data, "forecast")
    io_data = _section(data, "io")
    capacity_defaults = CapacityConfig()
    io_defaults = IOConfig()

    capacity = CapacityConfig(
        hours_per_week=int(capacity_data.get("hours_per_week", capacity_defaults.hours_per_week)),
        weeks_in_period=int(capacity_data.get("weeks_in_period", capacity_defaults.weeks_in_period)),
        default_floor_area=parse_decimal(
            capacity_data.get("default_floor_area", capacity_defaults.default_floor_area),
            "capacity.default_floor_area",
        ),
    )

    forecast = ForecastConfig(
        contingency_factor=parse_decimal(
            forecast_data.get("contingency_factor", ForecastConfig().contingency_factor),
            "forecast.contingency_factor",
        ),
    )

    io = IOConfig(
        load_timeout_seconds=parse_timeout(
            io_data.get("load_timeout_seconds", io_defaults.load_timeout_seconds),
            "io.load_timeout_seconds",
        ),
        write_timeout_seconds=parse_timeout(
            io_data.get("write_timeout_seconds", io_defaults.write_timeout_seconds),
            "io.write_timeout_seconds",
        ),
    )

    return AnalyticsConfig(
        config_id=str(data.get("config_id", "homebuilder-analytics")),
        version=int(data.get("version", 1)),
        risk_weights=RiskWeightsConfig(
            **_floats(_section(data, "risk_weights"), RiskWeightsConfig(), "risk_weights")
        ),
        placeholders=PlaceholderConfig(
            **_floats(_section(data, "placeholders"), PlaceholderConfig(), "placeholders")
        ),
        capacity=capacity,
        forecast=forecast,
        io=io,
        parallel_extractors=parse_bool(data.get("parallel_extractors", True), "parallel_extractors"),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
