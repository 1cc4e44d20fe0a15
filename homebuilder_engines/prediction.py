"""
homebuilder_engines.prediction -- Completion, overrun and defect predictions.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``completion_probability.on_time`` equals the timeline confidence for
      the same inputs; both come from ``forecasting.predict_completion_date``.
    - ``more_than_1_month == 1 - on_time`` exactly.
    - Every band is at most 1; risks and probabilities lie in [0, 100].
"""

from __future__ import annotations

from datetime import datetime

from homebuilder_engines.forecasting import clamp, predict_completion_date
from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import (
    BudgetMetrics,
    CompletionProbability,
    PredictionResult,
    QualityMetrics,
    RiskAssessment,
    Sourced,
    TimelineMetrics,
)
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.prediction")

DEFAULT_WEATHER_DELAY_RISK = 20.0


def completion_bands(on_time: float) -> CompletionProbability:
    return CompletionProbability(
        on_time=on_time,
        within_1_week=min(1.0, on_time + 0.1),
        within_2_weeks=min(1.0, on_time + 0.2),
        within_1_month=min(1.0, on_time + 0.3),
        more_than_1_month=1 - on_time,
    )


@traced_engine("prediction", "1.0", fingerprint_fields=("timeline", "budget", "quality", "now"))
def predict_completion(
    timeline: TimelineMetrics,
    budget: BudgetMetrics,
    quality: QualityMetrics,
    risk: RiskAssessment,
    now: datetime,
    weather_delay_default: float = DEFAULT_WEATHER_DELAY_RISK,
) -> PredictionResult:
    """Build the ``PredictionResult`` for one project.

    ``risk`` is accepted so callers pass the full assessment; none of the
    current formulas read it.
    """
    forecast = predict_completion_date(
        timeline.completion_percentage,
        now,
        days_elapsed=timeline.current_duration_days,
        days_overdue=timeline.days_overdue,
    )

    result = PredictionResult(
        completion_probability=completion_bands(forecast.confidence),
        predicted_completion_date=forecast.predicted_date,
        budget_overrun_risk=min(100.0, abs(float(budget.variance_percentage)) * 1.5),
        quality_issues_probability=clamp(quality.defect_count * 5.0, 0.0, 100.0),
        weather_delay_risk=Sourced.default(weather_delay_default),
    )

    logger.debug(
        "completion_predicted",
        extra={
            "on_time": result.completion_probability.on_time,
            "budget_overrun_risk": result.budget_overrun_risk,
            "overall_risk_score": risk.overall_risk_score,
        },
    )
    return result
