"""
Configuration Validator (``homebuilder_config.validator``).

Responsibility
--------------
Checks a parsed ``AnalyticsConfig`` before it is handed to callers.

Invariants enforced
-------------------
* Risk weights are non-negative and sum to 1.
* Timeouts are positive or null.
* Capacity figures are positive; the contingency factor is at least 1.
* Placeholder scores lie in [0, 100].

Failure modes
-------------
* Validation errors (``ConfigValidationResult.errors``) -> the
  configuration MUST NOT be used.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from decimal import Decimal

from homebuilder_config.schema import AnalyticsConfig

WEIGHT_SUM_TOLERANCE = 1e-9


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)


def validate_configuration(config: AnalyticsConfig) -> ConfigValidationResult:
    result = ConfigValidationResult()
    _validate_risk_weights(config, result)
    _validate_placeholders(config, result)
    _validate_capacity(config, result)
    _validate_io(config, result)
    return result


def _validate_risk_weights(config: AnalyticsConfig, result: ConfigValidationResult) -> None:
    weights = config.risk_weights
    values = []
    for f in fields(weights):
        value = getattr(weights, f.name)
        values.append(value)
        if value < 0:
            result.add_error(f"risk_weights.{f.name} must be non-negative, got {value}")
    total = math.fsum(values)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        result.add_error(f"risk_weights must sum to 1, got {total}")


def _validate_placeholders(config: AnalyticsConfig, result: ConfigValidationResult) -> None:
    for f in fields(config.placeholders):
        value = getattr(config.placeholders, f.name)
        if not 0 <= value <= 100:
            result.add_error(f"placeholders.{f.name} must be within [0, 100], got {value}")


def _validate_capacity(config: AnalyticsConfig, result: ConfigValidationResult) -> None:
    capacity = config.capacity
    if capacity.hours_per_week <= 0:
        result.add_error(f"capacity.hours_per_week must be positive, got {capacity.hours_per_week}")
    if capacity.weeks_in_period <= 0:
        result.add_error(f"capacity.weeks_in_period must be positive, got {capacity.weeks_in_period}")
    if capacity.default_floor_area <= 0:
        result.add_error(
            f"capacity.default_floor_area must be positive, got {capacity.default_floor_area}"
        )
    if config.forecast.contingency_factor < Decimal("1"):
        result.add_error(
            f"forecast.contingency_factor must be at least 1, got {config.forecast.contingency_factor}"
        )


def _validate_io(config: AnalyticsConfig, result: ConfigValidationResult) -> None:
    for name in ("load_timeout_seconds", "write_timeout_seconds"):
        value = getattr(config.io, name)
        if value is not None and value <= 0:
            result.add_error(f"io.{name} must be positive or null, got {value}")
