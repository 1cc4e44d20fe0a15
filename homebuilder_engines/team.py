"""
homebuilder_engines.team -- Team size, utilization and productivity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Utilization is measured against a fixed capacity baseline
      (members x hours_per_week x weeks_in_period) and capped at 100.
    - Utilization is 0 when no task has an assignee.
    - Productivity trend is STABLE: there is no historical baseline to
      compare against.
"""

from __future__ import annotations

from decimal import Decimal

from homebuilder_engines.tracer import traced_engine
from homebuilder_kernel.domain.metrics import ProductivityMetric, Sourced, TeamMetrics, Trend
from homebuilder_kernel.domain.snapshot import ProjectSnapshot, TaskStatus
from homebuilder_kernel.logging_config import get_logger

logger = get_logger("engines.team")

DEFAULT_HOURS_PER_WEEK = 40
DEFAULT_WEEKS_IN_PERIOD = 4
TASKS_PER_WEEK_BENCHMARK = 5.0
DEFAULT_COMMUNICATION_EFFICIENCY = 85.0


@traced_engine(
    "team", "1.0",
    fingerprint_fields=("snapshot", "hours_per_week", "weeks_in_period"),
)
def extract_team_metrics(
    snapshot: ProjectSnapshot,
    hours_per_week: int = DEFAULT_HOURS_PER_WEEK,
    weeks_in_period: int = DEFAULT_WEEKS_IN_PERIOD,
    communication_efficiency_default: float = DEFAULT_COMMUNICATION_EFFICIENCY,
) -> TeamMetrics:
    """Compute ``TeamMetrics`` for ``snapshot``."""
    members = {task.assignee_id for task in snapshot.tasks if task.assignee_id is not None}
    total_members = len(members)

    total_hours = sum(
        (entry.duration_hours or Decimal("0") for entry in snapshot.time_entries),
        Decimal("0"),
    )

    if total_members > 0:
        capacity = total_members * hours_per_week * weeks_in_period
        utilization = min(100.0, 100 * float(total_hours) / capacity)
    else:
        utilization = 0.0

    completed = sum(1 for task in snapshot.tasks if task.status == TaskStatus.COMPLETE)

    productivity = (
        ProductivityMetric(
            metric="Tasks per Week",
            value=completed / weeks_in_period,
            unit="tasks",
            trend=Trend.STABLE,
            benchmark=TASKS_PER_WEEK_BENCHMARK,
        ),
    )

    logger.debug(
        "team_metrics_computed",
        extra={
            "project_id": snapshot.project_id,
            "team_members": total_members,
            "logged_hours": str(total_hours),
            "tasks_completed": completed,
        },
    )

    return TeamMetrics(
        total_team_members=total_members,
        average_utilization=utilization,
        total_logged_hours=total_hours,
        tasks_completed=completed,
        tasks_total=len(snapshot.tasks),
        productivity_metrics=productivity,
        # Communication logs carry no response-time data yet
        communication_efficiency=Sourced.default(communication_efficiency_default),
    )
