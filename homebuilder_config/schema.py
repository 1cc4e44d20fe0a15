"""
AnalyticsConfig schema.

Frozen dataclasses for the analytics configuration.  YAML documents are
parsed into these types by the loader and checked by the validator before
``get_active_config()`` hands them out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class RiskWeightsConfig:
    """Weights of the normalized risk components; must sum to 1."""

    budget: float = 0.25
    schedule: float = 0.25
    quality: float = 0.20
    team: float = 0.15
    vendor: float = 0.10
    weather: float = 0.05


@dataclass(frozen=True)
class PlaceholderConfig:
    """Documented defaults for values with no integrated data source."""

    weather_risk: float = 20.0
    supply_chain_risk: float = 15.0
    weather_delay_risk: float = 20.0
    communication_efficiency: float = 85.0
    vendor_on_time_delivery_rate: float = 90.0
    vendor_quality_score: float = 85.0
    vendor_cost_efficiency: float = 80.0


@dataclass(frozen=True)
class CapacityConfig:
    hours_per_week: int = 40
    weeks_in_period: int = 4
    default_floor_area: Decimal = Decimal("1000")


@dataclass(frozen=True)
class ForecastConfig:
    contingency_factor: Decimal = Decimal("1.1")


@dataclass(frozen=True)
class IOConfig:
    """Timeouts in seconds for snapshot load and write; None disables."""

    load_timeout_seconds: float | None = 10.0
    write_timeout_seconds: float | None = 10.0


@dataclass(frozen=True)
class AnalyticsConfig:
    """The runtime analytics configuration."""

    config_id: str = "homebuilder-analytics"
    version: int = 1
    risk_weights: RiskWeightsConfig = field(default_factory=RiskWeightsConfig)
    placeholders: PlaceholderConfig = field(default_factory=PlaceholderConfig)
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    io: IOConfig = field(default_factory=IOConfig)
    parallel_extractors: bool = True
    checksum: str = ""
