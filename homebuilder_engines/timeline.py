"""
homebuilder_engines.timeline -- Schedule health metrics.

Responsibility:
    Derive durations, overdue days, completion and a velocity-based
    completion forecast from a project snapshot.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  ``now`` is passed in.

Invariants enforced:
    - Durations and overdue days are whole days rounded up, never negative.
    - ``days_overdue`` is zero for COMPLETE projects and for projects whose
      estimated end date is absent or still ahead.
    - ``confidence_level`` comes from ``forecasting.predict_completion_date``,
      the same helper the completion predictor uses.

Failure modes:
    - None.  Missing dates degrade to zero durations and the 30-day
      fallback forecast.
"""

from __future__ import annotations

from datetime import datetime

from homebuilder_engines.forecasting import ceil_days, clamp, predict_completion_date
from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import TimelineMetrics
from homebuilder_kernel.domain.snapshot import ProjectSnapshot, ProjectStatus
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.timeline")


def calculate_days_overdue(
    estimated_end_date: datetime | None,
    status: ProjectStatus,
    now: datetime,
) -> int:
    """Whole days past the estimated end date for projects still open."""
    if estimated_end_date is None or status == ProjectStatus.COMPLETE:
        return 0
    if now <= estimated_end_date:
        return 0
    return ceil_days(estimated_end_date, now)


@traced_engine("timeline", "1.0", fingerprint_fields=("snapshot", "now"))
def extract_timeline_metrics(snapshot: ProjectSnapshot, now: datetime) -> TimelineMetrics:
    """
    Compute ``TimelineMetrics`` for ``snapshot`` as of ``now``.

    Start is the actual start date when recorded, otherwise the estimated
    start.  Original duration needs both start and estimated end; current
    duration needs only the start.
    """
    start = snapshot.start_date
    end = snapshot.estimated_end_date

    original_duration = ceil_days(start, end) if start and end else 0
    current_duration = ceil_days(start, now) if start else 0
    days_overdue = calculate_days_overdue(end, snapshot.status, now)
    completion = clamp(float(snapshot.completion_percentage or 0), 0.0, 100.0)

    forecast = predict_completion_date(
        completion,
        now,
        days_elapsed=current_duration,
        days_overdue=days_overdue,
    )

    actual_duration = (
        current_duration if snapshot.status == ProjectStatus.COMPLETE else None
    )

    logger.debug(
        "timeline_metrics_computed",
        extra={
            "project_id": snapshot.project_id,
            "original_duration_days": original_duration,
            "current_duration_days": current_duration,
            "days_overdue": days_overdue,
            "predicted_days_remaining": round(forecast.days_remaining, 2),
        },
    )

    return TimelineMetrics(
        original_duration_days=original_duration,
        current_duration_days=current_duration,
        days_overdue=days_overdue,
        completion_percentage=completion,
        predicted_completion_date=forecast.predicted_date,
        confidence_level=forecast.confidence,
        actual_duration_days=actual_duration,
    )
