"""
Module: homebuilder_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    analytics engines.  This is the import surface for homebuilder_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import homebuilder_kernel (domain, logging) and sibling engine
    modules.  MUST NOT import homebuilder_services or homebuilder_config.

Invariants enforced:
    - Purity: engines never read the clock.  ``now`` is always a parameter.
    - Decimal arithmetic for money; scores and probabilities are floats.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every extractor and analyzer is wrapped by ``@traced_engine`` and emits
    a HOMEBUILDER_ENGINE_TRACE record with an input fingerprint and
    duration.

Usage:
    from homebuilder_engines import extract_timeline_metrics, analyze_risk
"""

from homebuilder_engines.budget import extract_budget_metrics, group_cost_by_category
from homebuilder_engines.forecasting import (
    CompletionForecast,
    calculate_burn_rate,
    confidence_from_overdue,
    predict_completion_date,
)
from homebuilder_engines.prediction import completion_bands, predict_completion
from homebuilder_engines.quality import extract_quality_metrics
from homebuilder_engines.risk import (
    RiskInputs,
    RiskWeights,
    analyze_risk,
    calculate_risk_score,
)
from homebuilder_engines.summary import (
    BENCHMARKS,
    ExecutiveSummary,
    KeyMetric,
    ProjectHealth,
    generate_executive_summary,
)
from homebuilder_engines.team import extract_team_metrics
from homebuilder_engines.timeline import calculate_days_overdue, extract_timeline_metrics
from homebuilder_engines.tracer import compute_input_fingerprint, traced_engine
from homebuilder_engines.vendor import extract_vendor_metrics, score_vendor

__all__ = [
    "BENCHMARKS",
    "CompletionForecast",
    "ExecutiveSummary",
    "KeyMetric",
    "ProjectHealth",
    "RiskInputs",
    "RiskWeights",
    "analyze_risk",
    "calculate_burn_rate",
    "calculate_days_overdue",
    "calculate_risk_score",
    "completion_bands",
    "compute_input_fingerprint",
    "confidence_from_overdue",
    "extract_budget_metrics",
    "extract_quality_metrics",
    "extract_team_metrics",
    "extract_timeline_metrics",
    "extract_vendor_metrics",
    "generate_executive_summary",
    "group_cost_by_category",
    "predict_completion",
    "predict_completion_date",
    "score_vendor",
    "traced_engine",
]
