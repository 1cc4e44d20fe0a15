"""
homebuilder_engines.risk -- Weighted project risk scoring.

Responsibility:
    Turn the five metric records into per-category risk sub-scores, a
    weighted overall risk score and a ranked list of the risks that matter.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Every sub-score and the overall score lie in [0, 100].
    - ``calculate_risk_score`` is monotonically non-decreasing in each risk
      input (budget variance magnitude, days overdue, lost quality, idle
      capacity, lost vendor quality, weather risk).
    - Weights are non-negative and sum to 1 (checked at construction).
    - ``top_risks`` omits zero sub-scores; ties keep category declaration
      order.

Usage:
    from homebuilder_engines.risk import RiskWeights, analyze_risk

    assessment = analyze_risk(timeline, budget, quality, team, vendors)
    assessment.overall_risk_score
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

from homebuilder_engines.forecasting import clamp
from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import (
    BudgetMetrics,
    QualityMetrics,
    RiskAssessment,
    RiskCategory,
    RiskFactor,
    Sourced,
    TeamMetrics,
    TimelineMetrics,
    VendorMetrics,
)
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.risk")

DEFAULT_WEATHER_RISK = 20.0
DEFAULT_SUPPLY_CHAIN_RISK = 15.0

_WEIGHT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class RiskWeights:
    """Relative weight of each normalized component in the overall score."""
    budget: float = 0.25
    schedule: float = 0.25
    quality: float = 0.20
    team: float = 0.15
    vendor: float = 0.10
    weather: float = 0.05

    def __post_init__(self) -> None:
        values = [getattr(self, f.name) for f in fields(self)]
        for f, value in zip(fields(self), values):
            if value < 0:
                raise ValueError(f"Risk weight '{f.name}' must be non-negative, got {value}")
        total = math.fsum(values)
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ValueError(f"Risk weights must sum to 1, got {total}")


@dataclass(frozen=True)
class RiskInputs:
    """Raw figures fed to ``calculate_risk_score``."""
    budget_variance: float  # percent
    days_overdue: float
    quality_score: float  # 0-100, higher is better
    team_utilization: float  # 0-100
    vendor_quality: float  # 0-100
    weather_risk: float  # 0-100


def calculate_risk_score(inputs: RiskInputs, weights: RiskWeights | None = None) -> float:
    """
    Weighted overall risk score in [0, 100], rounded to two places.

    Normalized components:
        budget   = min(100, |budget_variance| * 2)
        schedule = min(100, |days_overdue| * 2)
        quality  = max(0, 100 - quality_score)
        team     = max(0, 100 - team_utilization)
        vendor   = max(0, 100 - vendor_quality)
        weather  = clamp(weather_risk, 0, 100)
    """
    weights = weights or RiskWeights()

    budget = min(100.0, abs(inputs.budget_variance) * 2)
    schedule = min(100.0, abs(inputs.days_overdue) * 2)
    quality = max(0.0, 100 - inputs.quality_score)
    team = max(0.0, 100 - inputs.team_utilization)
    vendor = max(0.0, 100 - inputs.vendor_quality)
    weather = clamp(inputs.weather_risk, 0.0, 100.0)

    score = (
        budget * weights.budget
        + schedule * weights.schedule
        + quality * weights.quality
        + team * weights.team
        + vendor * weights.vendor
        + weather * weights.weather
    )
    return round(clamp(score, 0.0, 100.0), 2)


def rank_risks(scores: dict[RiskCategory, float]) -> tuple[RiskFactor, ...]:
    """Non-zero scores, highest first; ties keep ``RiskCategory`` order."""
    order = {category: index for index, category in enumerate(RiskCategory)}
    ranked = sorted(
        (item for item in scores.items() if item[1] > 0),
        key=lambda item: (-item[1], order[item[0]]),
    )
    return tuple(RiskFactor(category=c, score=s) for c, s in ranked)


@traced_engine(
    "risk", "1.0",
    fingerprint_fields=("timeline", "budget", "quality", "team", "vendors", "weights"),
)
def analyze_risk(
    timeline: TimelineMetrics,
    budget: BudgetMetrics,
    quality: QualityMetrics,
    team: TeamMetrics,
    vendors: VendorMetrics,
    weights: RiskWeights | None = None,
    weather_default: float = DEFAULT_WEATHER_RISK,
    supply_chain_default: float = DEFAULT_SUPPLY_CHAIN_RISK,
) -> RiskAssessment:
    """Score schedule, budget and quality risk and combine them with the
    team and vendor figures into a ``RiskAssessment``."""
    variance_pct = float(budget.variance_percentage)

    budget_risk = min(100.0, abs(variance_pct) * 2)
    schedule_risk = float(min(100, max(0, timeline.days_overdue * 3)))
    quality_risk = float(min(100, quality.defect_count * 10))

    # No weather or logistics feed is integrated
    weather_risk = Sourced.default(weather_default)
    supply_chain_risk = Sourced.default(supply_chain_default)

    overall = calculate_risk_score(
        RiskInputs(
            budget_variance=variance_pct,
            days_overdue=timeline.days_overdue,
            quality_score=100 - quality_risk,
            team_utilization=team.average_utilization,
            vendor_quality=vendors.quality_score.value,
            weather_risk=weather_risk.value,
        ),
        weights,
    )

    top_risks = rank_risks({
        RiskCategory.SCHEDULE: schedule_risk,
        RiskCategory.BUDGET: budget_risk,
        RiskCategory.QUALITY: quality_risk,
        RiskCategory.WEATHER: weather_risk.value,
        RiskCategory.SUPPLY_CHAIN: supply_chain_risk.value,
    })

    logger.debug(
        "risk_assessed",
        extra={
            "overall_risk_score": overall,
            "schedule_risk": schedule_risk,
            "budget_risk": budget_risk,
            "quality_risk": quality_risk,
        },
    )

    return RiskAssessment(
        overall_risk_score=overall,
        schedule_risk=schedule_risk,
        budget_risk=budget_risk,
        quality_risk=quality_risk,
        weather_risk=weather_risk,
        supply_chain_risk=supply_chain_risk,
        top_risks=top_risks,
    )
