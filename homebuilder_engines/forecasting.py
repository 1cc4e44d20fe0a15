"""
homebuilder_engines.forecasting -- Shared schedule and spend forecasting helpers.

Responsibility:
    The single home of the completion-confidence formula, the velocity-based
    completion-date prediction and the burn-rate calculation.  The timeline
    extractor and the completion predictor both call
    ``predict_completion_date`` so their confidence values can never drift
    apart.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock access.

Invariants enforced:
    - ``confidence_from_overdue`` is clamped to [0.3, 0.9].
    - Forecast horizons are capped at ``MAX_FORECAST_DAYS`` so a near-zero
      velocity cannot overflow ``datetime``.
    - Burn rate never divides by less than one day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

SECONDS_PER_DAY = 86400

CONFIDENCE_FLOOR = 0.3
CONFIDENCE_CEILING = 0.9
CONFIDENCE_DECAY_DAYS = 30

FALLBACK_DAYS_REMAINING = 30.0
MAX_FORECAST_DAYS = 36500.0


@dataclass(frozen=True)
class CompletionForecast:
    predicted_date: datetime
    confidence: float
    days_remaining: float


def elapsed_days(start: datetime, end: datetime) -> float:
    """Fractional days from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def ceil_days(start: datetime, end: datetime) -> int:
    """Whole days from ``start`` to ``end``, rounded up, never below zero."""
    return max(0, math.ceil(elapsed_days(start, end)))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def confidence_from_overdue(days_overdue: int) -> float:
    """Linear decay of forecast confidence with schedule slippage.

    ``1 - days_overdue / 30`` clamped to [0.3, 0.9]: an on-schedule project
    tops out at 0.9 and anything 21+ days overdue bottoms out at 0.3.
    """
    return clamp(
        1 - days_overdue / CONFIDENCE_DECAY_DAYS,
        CONFIDENCE_FLOOR,
        CONFIDENCE_CEILING,
    )


def predict_completion_date(
    completion_percentage: float,
    now: datetime,
    *,
    days_elapsed: int = 0,
    days_overdue: int = 0,
) -> CompletionForecast:
    """
    Velocity-based completion forecast.

    velocity = completion / max(1, days_elapsed)   (percent per day)
    days_remaining = (100 - completion) / velocity, or 30 when velocity is 0

    Args:
        completion_percentage: Declared completion in [0, 100].
        now: Reference instant of the computation.
        days_elapsed: Whole days since project start.
        days_overdue: Whole days past the estimated end date.
    """
    velocity = completion_percentage / max(1, days_elapsed)
    remaining_work = 100 - completion_percentage
    if velocity > 0:
        days_remaining = min(remaining_work / velocity, MAX_FORECAST_DAYS)
    else:
        days_remaining = FALLBACK_DAYS_REMAINING

    return CompletionForecast(
        predicted_date=now + timedelta(days=days_remaining),
        confidence=confidence_from_overdue(days_overdue),
        days_remaining=days_remaining,
    )


def calculate_burn_rate(
    spent_amount: Decimal,
    start_date: datetime | None,
    now: datetime,
) -> Decimal:
    """Spend per elapsed day since ``start_date``; 0 when there is no start.

    Elapsed time is fractional and floored at one day.
    """
    if start_date is None:
        return Decimal("0")
    days = max(Decimal("1"), Decimal(str(elapsed_days(start_date, now))))
    return (spent_amount / days).quantize(Decimal("0.01"))
