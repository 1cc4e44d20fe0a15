"""
homebuilder_engines.summary -- Executive summary and industry benchmarks.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Reads a finished
    ``AnalyticsSnapshot``; never recomputes metrics.

Status bands (overall risk score):
    < 30  ON_TRACK
    < 60  AT_RISK
    else  CRITICAL
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from homebuilder_kernel.domain.metrics import AnalyticsSnapshot, RiskCategory, RiskFactor
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.summary")

ON_TRACK_THRESHOLD = 30.0
AT_RISK_THRESHOLD = 60.0
BUDGET_VARIANCE_ALERT = Decimal("10")
DEFECT_ALERT = 5
LOW_UTILIZATION = 70.0
MAX_TOP_ISSUES = 3

# What a healthy residential build looks like
BENCHMARKS = MappingProxyType({
    "budget_variance": 5.0,  # +/- percent
    "schedule_variance": 7.0,  # +/- days
    "quality_score": 85.0,
    "team_utilization": 80.0,
    "vendor_on_time": 90.0,
    "inspection_pass_rate": 95.0,
    "client_satisfaction": 4.5,  # out of 5
    "rework_rate": 2.0,  # percent
    "defect_density": 0.1,
    "cost_per_sq_ft": 150.0,
})


class ProjectHealth(str, Enum):
    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class KeyMetric:
    metric: str
    value: str
    status: str


@dataclass(frozen=True)
class ExecutiveSummary:
    project_id: str
    status: ProjectHealth
    key_metrics: tuple[KeyMetric, ...]
    top_issues: tuple[str, ...]


_RISK_LABELS = {
    RiskCategory.SCHEDULE: "Schedule",
    RiskCategory.BUDGET: "Budget",
    RiskCategory.QUALITY: "Quality",
    RiskCategory.WEATHER: "Weather",
    RiskCategory.SUPPLY_CHAIN: "Supply chain",
}


def benchmarks(cost_per_sq_ft: float | None = None) -> dict[str, float]:
    """Benchmark table, optionally with a regional cost per square foot."""
    table = dict(BENCHMARKS)
    if cost_per_sq_ft is not None:
        table["cost_per_sq_ft"] = cost_per_sq_ft
    return table


def classify_health(overall_risk_score: float) -> ProjectHealth:
    if overall_risk_score < ON_TRACK_THRESHOLD:
        return ProjectHealth.ON_TRACK
    if overall_risk_score < AT_RISK_THRESHOLD:
        return ProjectHealth.AT_RISK
    return ProjectHealth.CRITICAL


def describe_risk(factor: RiskFactor) -> str:
    return f"{_RISK_LABELS[factor.category]} risk {factor.score:.0f}/100"


def generate_executive_summary(snapshot: AnalyticsSnapshot) -> ExecutiveSummary:
    timeline = snapshot.timeline
    budget = snapshot.budget
    quality = snapshot.quality
    team = snapshot.team

    key_metrics = (
        KeyMetric(
            metric="Schedule",
            value=f"{timeline.completion_percentage:g}% complete",
            status="BEHIND" if timeline.days_overdue > 0 else "ON_TRACK",
        ),
        KeyMetric(
            metric="Budget",
            value=f"{budget.variance_percentage:.1f}% variance",
            status="OVER" if abs(budget.variance_percentage) > BUDGET_VARIANCE_ALERT else "ON_TRACK",
        ),
        KeyMetric(
            metric="Quality",
            value=f"{quality.defect_count} defects",
            status="POOR" if quality.defect_count > DEFECT_ALERT else "GOOD",
        ),
        KeyMetric(
            metric="Team",
            value=f"{team.average_utilization:.1f}% utilized",
            status="LOW" if team.average_utilization < LOW_UTILIZATION else "GOOD",
        ),
    )

    summary = ExecutiveSummary(
        project_id=snapshot.project_id,
        status=classify_health(snapshot.risks.overall_risk_score),
        key_metrics=key_metrics,
        top_issues=tuple(describe_risk(f) for f in snapshot.risks.top_risks[:MAX_TOP_ISSUES]),
    )

    logger.info(
        "executive_summary_generated",
        extra={"project_id": snapshot.project_id, "status": summary.status.value},
    )
    return summary
