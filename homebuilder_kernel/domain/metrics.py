"""
Analytics Result Domain Models (``homebuilder_kernel.domain.metrics``).

Responsibility
--------------
Frozen dataclass value objects for everything one analytics computation
produces: the five metric records, the risk assessment, the completion
prediction, and the ``AnalyticsSnapshot`` that aggregates them and is
persisted per project.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Produced by
``homebuilder_engines`` and assembled by the analytics orchestrator.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* Money stays ``Decimal``; scores, rates and probabilities are ``float``.
* Values that may come from a documented default instead of a real data
  source are wrapped in ``Sourced`` so consumers can tell them apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class DataSource(str, Enum):
    """Where a ``Sourced`` value came from."""

    MEASURED = "MEASURED"  # Derived from project data
    UNAVAILABLE = "UNAVAILABLE"  # Data source not integrated; documented default


@dataclass(frozen=True)
class Sourced:
    """A numeric value tagged with its provenance."""
    value: float
    source: DataSource

    @classmethod
    def measured(cls, value: float) -> Sourced:
        return cls(value=value, source=DataSource.MEASURED)

    @classmethod
    def default(cls, value: float) -> Sourced:
        return cls(value=value, source=DataSource.UNAVAILABLE)

    @property
    def is_measured(self) -> bool:
        return self.source == DataSource.MEASURED


class Trend(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class RiskCategory(str, Enum):
    """Named risk sub-scores, in tie-break order."""

    SCHEDULE = "SCHEDULE"
    BUDGET = "BUDGET"
    QUALITY = "QUALITY"
    WEATHER = "WEATHER"
    SUPPLY_CHAIN = "SUPPLY_CHAIN"


# ---------------------------------------------------------------------------
# Metric records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimelineMetrics:
    original_duration_days: int
    current_duration_days: int
    days_overdue: int
    completion_percentage: float
    predicted_completion_date: datetime
    confidence_level: float
    actual_duration_days: int | None = None


@dataclass(frozen=True)
class CategorySpend:
    """Budgeted vs spent for one budget category."""
    category: str
    budgeted: Decimal
    spent: Decimal
    variance: Decimal
    variance_percentage: Decimal


@dataclass(frozen=True)
class BudgetMetrics:
    original_budget: Decimal
    current_budget: Decimal
    spent_amount: Decimal
    committed_amount: Decimal
    remaining_budget: Decimal
    variance: Decimal
    variance_percentage: Decimal
    burn_rate_per_day: Decimal
    predicted_final_cost: Decimal
    # Insertion-ordered: first appearance of each category in the line items
    cost_by_category: dict[str, CategorySpend] = field(default_factory=dict)


@dataclass(frozen=True)
class QualityMetrics:
    defect_count: int
    defect_density: float  # defects per sq ft
    inspection_pass_rate: float
    inspection_count: int = 0


@dataclass(frozen=True)
class ProductivityMetric:
    metric: str
    value: float
    unit: str
    trend: Trend
    benchmark: float


@dataclass(frozen=True)
class TeamMetrics:
    total_team_members: int
    average_utilization: float
    total_logged_hours: Decimal
    tasks_completed: int
    tasks_total: int
    productivity_metrics: tuple[ProductivityMetric, ...]
    communication_efficiency: Sourced


@dataclass(frozen=True)
class VendorPerformance:
    """Measured performance of one supplier (only measured scores are set)."""
    vendor_id: str
    name: str
    on_time_rate: float | None
    quality_score: float | None
    cost_efficiency: float | None
    overall_score: float


@dataclass(frozen=True)
class VendorMetrics:
    total_vendors: int
    on_time_delivery_rate: Sourced
    quality_score: Sourced
    cost_efficiency: Sourced
    top_vendors: tuple[VendorPerformance, ...] = ()


# ---------------------------------------------------------------------------
# Risk and prediction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskFactor:
    category: RiskCategory
    score: float


@dataclass(frozen=True)
class RiskAssessment:
    overall_risk_score: float
    schedule_risk: float
    budget_risk: float
    quality_risk: float
    weather_risk: Sourced
    supply_chain_risk: Sourced
    top_risks: tuple[RiskFactor, ...] = ()


@dataclass(frozen=True)
class CompletionProbability:
    """
    Heuristic banding around the on-time confidence.

    Not a calibrated CDF: the wider horizons are fixed offsets from
    ``on_time`` and ``more_than_1_month`` is exactly ``1 - on_time``.
    """
    on_time: float
    within_1_week: float
    within_2_weeks: float
    within_1_month: float
    more_than_1_month: float


@dataclass(frozen=True)
class PredictionResult:
    completion_probability: CompletionProbability
    predicted_completion_date: datetime
    budget_overrun_risk: float
    quality_issues_probability: float
    weather_delay_risk: Sourced


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """
    Everything computed for one project in one cycle.

    Persisted as a single row per project and replaced wholesale on every
    computation.
    """
    project_id: str
    generated_at: datetime
    timeline: TimelineMetrics
    budget: BudgetMetrics
    quality: QualityMetrics
    team: TeamMetrics
    vendors: VendorMetrics
    risks: RiskAssessment
    predictions: PredictionResult

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible rendering (Decimal as str, datetimes as ISO 8601)."""
        return _to_jsonable(self)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value
